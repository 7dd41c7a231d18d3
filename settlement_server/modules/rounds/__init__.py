"""Round settlement module."""

from .exceptions import (
    DuplicateRoundError,
    InvalidMoveSequenceError,
    InvalidSubmissionError,
    NoLivesRemainingError,
    RoundSettlementError,
)
from .models import PlayerStats, RoundSubmission, SettledRound
from .service import RoundSettlementService

__all__ = [
    "DuplicateRoundError",
    "InvalidMoveSequenceError",
    "InvalidSubmissionError",
    "NoLivesRemainingError",
    "PlayerStats",
    "RoundSettlementError",
    "RoundSettlementService",
    "RoundSubmission",
    "SettledRound",
]
