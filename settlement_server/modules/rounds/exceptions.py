"""Round settlement errors."""

from typing import Sequence


class RoundSettlementError(Exception):
    """Base class for round settlement errors."""


class InvalidSubmissionError(RoundSettlementError):
    """The submitted round is malformed (missing fields, empty or oversized move log)."""


class InvalidMoveSequenceError(RoundSettlementError):
    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("Invalid move sequence detected")
        self.errors = list(errors)


class DuplicateRoundError(RoundSettlementError):
    def __init__(self) -> None:
        super().__init__("Round already submitted")


class NoLivesRemainingError(RoundSettlementError):
    def __init__(self) -> None:
        super().__init__("No lives remaining")
