"""SQLAlchemy implementation for game configurations"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.db.models import GameConfig


class SqlGameConfigRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, game_id: str) -> GameConfig | None:
        return await self.session.get(GameConfig, game_id)

    async def list_active(self) -> Sequence[GameConfig]:
        stmt = select(GameConfig).where(GameConfig.active.is_(True)).order_by(GameConfig.game_id)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def upsert(
        self,
        *,
        game_id: str,
        name: str,
        description: str | None,
        active: bool,
        lives_config: dict[str, Any],
        scoring_rules: dict[str, Any],
        payment_config: dict[str, Any],
    ) -> GameConfig:
        model = await self.get(game_id)
        if model is None:
            model = GameConfig(game_id=game_id)
            self.session.add(model)
        model.name = name
        model.description = description
        model.active = active
        model.lives_config = lives_config
        model.scoring_rules = scoring_rules
        model.payment_config = payment_config
        await self.session.flush()
        return model
