"""Leaderboard service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.core.config import Settings
from settlement_server.infrastructure.database.repositories.leaderboard_repository import SqlLeaderboardRepository
from settlement_server.modules.games import GameConfigService

from .models import Leaderboard, LeaderboardEntry, period_start
from .repository import LeaderboardRepository

MAX_LIMIT = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class LeaderboardService:
    repository: LeaderboardRepository
    games: GameConfigService
    clock: Callable[[], datetime] = field(default=utc_now)

    @classmethod
    def with_session(
        cls, session: AsyncSession, settings: Settings, clock: Callable[[], datetime] = utc_now
    ) -> "LeaderboardService":
        return cls(SqlLeaderboardRepository(session), GameConfigService.with_session(session, settings), clock)

    async def top(self, game_id: str, *, period: str = "daily", limit: int = 10) -> Leaderboard:
        await self.games.get_active(game_id)
        since = period_start(period, self.clock())
        rows = await self.repository.top_scores(game_id, since=since, limit=max(1, min(limit, MAX_LIMIT)))
        entries = [
            LeaderboardEntry(rank=index, wallet=wallet, score=score, games_played=games)
            for index, (wallet, score, games) in enumerate(rows, start=1)
        ]
        return Leaderboard(game_id=game_id, period=period, entries=entries)
