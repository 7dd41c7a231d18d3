"""Domain models for per-game configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

TIERS = ("cheap", "mid", "high")


@dataclass(slots=True)
class LivesRules:
    daily_free_lives: int
    initial_free_lives: int
    claim_attempts_per_day: int
    claim_window_seconds: int
    bonus_divisor: int
    bonus_cap: int
    paid_life_cap: int


@dataclass(slots=True)
class ScoringRules:
    validation_required: bool = True
    engine: Optional[str] = None
    max_moves: int = 10_000
    score_per_move: int = 10
    max_score: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PaymentRules:
    enabled: bool
    prices_usd: dict[str, Decimal]
    lives_per_tier: dict[str, int]


@dataclass(slots=True)
class GameConfig:
    game_id: str
    name: str
    active: bool
    lives: LivesRules
    scoring: ScoringRules
    payment: PaymentRules
    description: Optional[str] = None

    @property
    def validation_engine(self) -> str:
        return self.scoring.engine or self.game_id
