"""Game configuration service."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.core.config import Settings
from settlement_server.db.models import GameConfig as GameConfigModel
from settlement_server.infrastructure.database.repositories.game_repository import SqlGameConfigRepository

from .exceptions import GameNotFoundError, ValidationNotEnabledError
from .models import TIERS, GameConfig, LivesRules, PaymentRules, ScoringRules
from .repository import GameConfigRepository

_SCORING_KEYS = {"validation_required", "engine", "max_moves", "score_per_move", "max_score"}


@dataclass(slots=True)
class GameConfigService:
    repository: GameConfigRepository
    settings: Settings

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings) -> "GameConfigService":
        return cls(SqlGameConfigRepository(session), settings)

    async def get_active(self, game_id: str) -> GameConfig:
        model = await self.repository.get(game_id)
        if model is None or not model.active:
            raise GameNotFoundError(game_id)
        return self._to_domain(model)

    async def get_for_validation(self, game_id: str) -> GameConfig:
        config = await self.get_active(game_id)
        if not config.scoring.validation_required:
            raise ValidationNotEnabledError(game_id)
        return config

    async def list_active(self) -> list[GameConfig]:
        return [self._to_domain(model) for model in await self.repository.list_active()]

    async def save(
        self,
        *,
        game_id: str,
        name: str,
        description: Optional[str] = None,
        active: bool = True,
        lives_config: Optional[dict[str, Any]] = None,
        scoring_rules: Optional[dict[str, Any]] = None,
        payment_config: Optional[dict[str, Any]] = None,
    ) -> GameConfig:
        model = await self.repository.upsert(
            game_id=game_id,
            name=name,
            description=description,
            active=active,
            lives_config=lives_config or {},
            scoring_rules=scoring_rules or {"validation_required": True},
            payment_config=payment_config or {},
        )
        return self._to_domain(model)

    def _to_domain(self, model: GameConfigModel) -> GameConfig:
        lives_raw = model.lives_config or {}
        scoring_raw = model.scoring_rules or {}
        payment_raw = model.payment_config or {}
        lives_defaults = self.settings.lives
        payment_defaults = self.settings.payments

        lives = LivesRules(
            daily_free_lives=int(lives_raw.get("daily_free_lives", lives_defaults.daily_free_lives)),
            initial_free_lives=int(lives_raw.get("initial_free_lives", lives_defaults.initial_free_lives)),
            claim_attempts_per_day=int(
                lives_raw.get("claim_attempts_per_day", lives_defaults.claim_attempts_per_day)
            ),
            claim_window_seconds=int(lives_raw.get("claim_window_seconds", lives_defaults.claim_window_seconds)),
            bonus_divisor=int(lives_raw.get("bonus_divisor", lives_defaults.bonus_divisor)),
            bonus_cap=int(lives_raw.get("bonus_cap", lives_defaults.bonus_cap)),
            paid_life_cap=int(lives_raw.get("paid_life_cap", lives_defaults.paid_life_cap)),
        )

        max_score = scoring_raw.get("max_score")
        scoring = ScoringRules(
            validation_required=bool(scoring_raw.get("validation_required", False)),
            engine=scoring_raw.get("engine"),
            max_moves=int(scoring_raw.get("max_moves", 10_000)),
            score_per_move=int(scoring_raw.get("score_per_move", 10)),
            max_score=int(max_score) if max_score is not None else None,
            extra={key: value for key, value in scoring_raw.items() if key not in _SCORING_KEYS},
        )

        prices_raw = payment_raw.get("prices_usd") or {}
        lives_raw_tiers = payment_raw.get("lives_per_tier") or {}
        payment = PaymentRules(
            enabled=payment_raw.get("enabled", True) is not False,
            prices_usd={
                tier: Decimal(str(prices_raw.get(tier, payment_defaults.prices_usd[tier]))) for tier in TIERS
            },
            lives_per_tier={
                tier: int(lives_raw_tiers.get(tier, payment_defaults.lives_per_tier[tier])) for tier in TIERS
            },
        )

        return GameConfig(
            game_id=model.game_id,
            name=model.name,
            active=bool(model.active),
            description=model.description,
            lives=lives,
            scoring=scoring,
            payment=payment,
        )
