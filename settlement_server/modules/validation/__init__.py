"""Deterministic replay validation."""

from .base import BaseSequenceValidator, InvalidMoveError, SequenceValidator, timestamp_errors
from .generic import GenericValidator
from .models import Move, ValidationResult
from .puzzle import PuzzleValidator
from .registry import ValidatorRegistry, default_registry, register_validator
from .rng import SeededRandom, seed_hash
from .tetris import TetrisValidator

__all__ = [
    "BaseSequenceValidator",
    "GenericValidator",
    "InvalidMoveError",
    "Move",
    "PuzzleValidator",
    "SeededRandom",
    "SequenceValidator",
    "TetrisValidator",
    "ValidationResult",
    "ValidatorRegistry",
    "default_registry",
    "register_validator",
    "seed_hash",
    "timestamp_errors",
]
