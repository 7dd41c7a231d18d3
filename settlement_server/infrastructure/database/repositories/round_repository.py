"""SQLAlchemy implementation for round records and stats."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.db.models import RoundRecord, UserGameStats


class SqlRoundRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def replay_exists(self, *, wallet: str, game_id: str, seed_hash: str, moves_hash: str) -> bool:
        stmt = select(RoundRecord.id).where(
            RoundRecord.wallet == wallet,
            RoundRecord.game_id == game_id,
            RoundRecord.seed_hash == seed_hash,
            RoundRecord.moves_hash == moves_hash,
        )
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

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
    ) -> RoundRecord:
        record = RoundRecord(
            game_id=game_id,
            wallet=wallet,
            score=score,
            game_data=game_data,
            moves_hash=moves_hash,
            seed_hash=seed_hash,
            validated=True,
            created_at=created_at,
        )
        self.session.add(record)
        await self.session.flush()
        return record

    async def record_stats(self, *, wallet: str, game_id: str, score: int, played_at: datetime) -> UserGameStats:
        stmt = (
            select(UserGameStats)
            .where(UserGameStats.wallet == wallet, UserGameStats.game_id == game_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        stats = result.scalars().first()
        if stats is None:
            stats = UserGameStats(
                wallet=wallet,
                game_id=game_id,
                games_played=1,
                high_score=score,
                total_score=score,
                last_played_at=played_at,
            )
            self.session.add(stats)
        else:
            stats.games_played += 1
            stats.high_score = max(stats.high_score, score)
            stats.total_score += score
            stats.last_played_at = played_at
        await self.session.flush()
        return stats

    async def stats_for_wallet(self, wallet: str) -> list[UserGameStats]:
        stmt = select(UserGameStats).where(UserGameStats.wallet == wallet).order_by(UserGameStats.game_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
