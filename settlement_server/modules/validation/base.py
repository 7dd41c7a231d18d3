"""Validator contract and the checks shared by every game simulator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, Sequence

from settlement_server.modules.games.models import ScoringRules

from .models import Move, ValidationResult
from .rng import seed_hash


class InvalidMoveError(ValueError):
    """Raised by a simulator when a move cannot be applied."""


class SequenceValidator(Protocol):
    """Recomputes a round's outcome from its move log and seed."""

    def validate(self, moves: Sequence[Move], seed: str, rules: ScoringRules) -> ValidationResult:
        ...


def timestamp_errors(moves: Sequence[Move]) -> list[str]:
    """One error per move whose timestamp does not strictly increase."""
    return [
        f"Invalid timestamp order at move {index}"
        for index in range(1, len(moves))
        if moves[index].timestamp <= moves[index - 1].timestamp
    ]


def seed_multiplier(seed: str) -> float:
    """Map a seed onto a multiplier in ``[1.0, 1.099]``."""
    return 1 + (abs(seed_hash(seed)) % 100) / 1000


class BaseSequenceValidator(ABC):
    """Runs the move-log invariants, then delegates scoring to :meth:`simulate`."""

    def validate(self, moves: Sequence[Move], seed: str, rules: ScoringRules) -> ValidationResult:
        if not moves:
            return ValidationResult.rejected("No moves provided")
        if len(moves) > rules.max_moves:
            return ValidationResult.rejected(f"Too many moves (max: {rules.max_moves})")

        errors = timestamp_errors(moves)
        if errors:
            return ValidationResult.rejected(*errors)

        try:
            result = self.simulate(moves, seed, rules)
        except InvalidMoveError as exc:
            return ValidationResult.rejected(f"Invalid move sequence: {exc}")

        if rules.max_score is not None and result.score > rules.max_score:
            return ValidationResult.rejected(f"Score {result.score} exceeds maximum of {rules.max_score}")
        return result

    @abstractmethod
    def simulate(self, moves: Sequence[Move], seed: str, rules: ScoringRules) -> ValidationResult:
        ...
