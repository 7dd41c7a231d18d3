"""SQLAlchemy leaderboard queries."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.db.models import RoundRecord, UserGameStats


class SqlLeaderboardRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def top_scores(self, game_id: str, *, since: Optional[datetime], limit: int) -> list[tuple[str, int, int]]:
        if since is None:
            stmt = (
                select(UserGameStats.wallet, UserGameStats.high_score, UserGameStats.games_played)
                .where(UserGameStats.game_id == game_id)
                .order_by(UserGameStats.high_score.desc(), UserGameStats.wallet)
                .limit(limit)
            )
        else:
            best = func.max(RoundRecord.score).label("best")
            stmt = (
                select(RoundRecord.wallet, best, func.count(RoundRecord.id))
                .where(
                    RoundRecord.game_id == game_id,
                    RoundRecord.validated.is_(True),
                    RoundRecord.created_at >= since,
                )
                .group_by(RoundRecord.wallet)
                .order_by(best.desc(), RoundRecord.wallet)
                .limit(limit)
            )
        result = await self.session.execute(stmt)
        return [(wallet, int(score), int(games)) for wallet, score, games in result.all()]
