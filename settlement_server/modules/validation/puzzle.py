"""Scoring for puzzle games reporting solved and failed attempts."""

from __future__ import annotations

from typing import Any, Sequence

from settlement_server.modules.games.models import ScoringRules

from .base import BaseSequenceValidator
from .models import Move, ValidationResult
from .registry import register_validator

POINTS_PER_SOLUTION = 100
PENALTY_PER_ERROR = 10
MAX_SOLUTIONS = 100


def _is_correct(data: Any) -> bool:
    return isinstance(data, dict) and bool(data.get("correct"))


@register_validator("puzzle")
class PuzzleValidator(BaseSequenceValidator):
    """Only ``solve`` moves score; a wrong answer costs points but never drops below zero."""

    def simulate(self, moves: Sequence[Move], seed: str, rules: ScoringRules) -> ValidationResult:
        points = int(rules.extra.get("points_per_solution", POINTS_PER_SOLUTION))
        penalty = int(rules.extra.get("penalty_per_error", PENALTY_PER_ERROR))
        max_solutions = int(rules.extra.get("max_solutions", MAX_SOLUTIONS))

        score = 0
        solutions = 0
        for move in moves:
            if move.type != "solve":
                continue
            if _is_correct(move.data):
                solutions += 1
                score += points
            else:
                score = max(0, score - penalty)

        if solutions > max_solutions:
            return ValidationResult.rejected("Too many solutions claimed")
        return ValidationResult.accepted(score, {"solutions_found": solutions, "total_moves": len(moves)})
