"""Repository protocol for payment records and processed markers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from settlement_server.db.models import PaymentRecord as PaymentRecordModel


class PaymentRepository(Protocol):
    async def is_processed(self, signature: str, *, now: datetime) -> bool:
        ...

    async def add_payment(
        self,
        *,
        wallet: str,
        signature: str,
        amount: Decimal,
        token: str,
        lives_bought: int,
        tier: str,
        game_id: str,
        created_at: datetime,
    ) -> PaymentRecordModel:
        ...

    async def add_marker(self, signature: str, *, expires_at: datetime) -> None:
        ...

    async def lives_bought_since(self, wallet: str, since: datetime) -> int:
        ...

    async def purge_markers(self, *, now: datetime) -> int:
        ...
