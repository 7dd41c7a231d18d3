"""Repository protocol for lives accounts."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from settlement_server.db.models import LivesAccount as LivesAccountModel


class LivesRepository(Protocol):
    async def get(self, wallet: str, *, for_update: bool = False) -> LivesAccountModel | None:
        ...

    async def create(self, wallet: str, *, free_today: int, paid_bank: int, today: date) -> LivesAccountModel:
        ...

    async def decrement(self, wallet: str, bucket: str) -> LivesAccountModel | None:
        ...

    async def increment_paid(self, wallet: str, amount: int) -> LivesAccountModel | None:
        ...

    async def flush(self) -> None:
        ...

    async def reset_stale(self, *, today: date, daily_grant: int) -> int:
        ...
