"""Fallback scoring for games without a dedicated simulator."""

from __future__ import annotations

import math
from typing import Sequence

from settlement_server.modules.games.models import ScoringRules

from .base import BaseSequenceValidator, seed_multiplier
from .models import Move, ValidationResult


class GenericValidator(BaseSequenceValidator):
    def simulate(self, moves: Sequence[Move], seed: str, rules: ScoringRules) -> ValidationResult:
        base_score = len(moves) * rules.score_per_move
        multiplier = seed_multiplier(seed)
        return ValidationResult.accepted(
            math.floor(base_score * multiplier),
            {"total_moves": len(moves), "seed_multiplier": multiplier, "base_score": base_score},
        )
