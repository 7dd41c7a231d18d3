"""Game configuration module."""

from .exceptions import GameConfigError, GameNotFoundError, ValidationNotEnabledError
from .models import TIERS, GameConfig, LivesRules, PaymentRules, ScoringRules
from .service import GameConfigService

__all__ = [
    "TIERS",
    "GameConfig",
    "GameConfigError",
    "GameConfigService",
    "GameNotFoundError",
    "LivesRules",
    "PaymentRules",
    "ScoringRules",
    "ValidationNotEnabledError",
]
