"""Repository protocol for game configurations."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from settlement_server.db.models import GameConfig as GameConfigModel


class GameConfigRepository(Protocol):
    async def get(self, game_id: str) -> GameConfigModel | None:
        ...

    async def list_active(self) -> Sequence[GameConfigModel]:
        ...

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
    ) -> GameConfigModel:
        ...
