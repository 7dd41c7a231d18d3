"""Repository protocol for round records and per-player stats."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from settlement_server.db.models import RoundRecord as RoundRecordModel
from settlement_server.db.models import UserGameStats as UserGameStatsModel


class RoundRepository(Protocol):
    async def replay_exists(self, *, wallet: str, game_id: str, seed_hash: str, moves_hash: str) -> bool:
        ...

    async def add_round(
        self,
        *,
        game_id: str,
        wallet: str,
        score: int,
        game_data: dict[str, Any],
        moves_hash: str,
        seed_hash: str,
        created_at: datetime,
    ) -> RoundRecordModel:
        ...

    async def record_stats(self, *, wallet: str, game_id: str, score: int, played_at: datetime) -> UserGameStatsModel:
        ...

    async def stats_for_wallet(self, wallet: str) -> list[UserGameStatsModel]:
        ...
