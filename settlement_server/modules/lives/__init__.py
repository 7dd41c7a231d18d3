"""Lives ledger module."""

from .bonus import BonusCalculator
from .claims import DailyClaimService
from .exceptions import LivesAccountMissingError, LivesError, NoLivesAvailableError, RateLimitExceededError
from .models import ClaimOutcome, LivesBalance
from .policy import BUCKET_PRIORITY, compute_bonus, pick_bucket
from .service import LivesLedger

__all__ = [
    "BUCKET_PRIORITY",
    "BonusCalculator",
    "ClaimOutcome",
    "DailyClaimService",
    "LivesAccountMissingError",
    "LivesBalance",
    "LivesError",
    "LivesLedger",
    "NoLivesAvailableError",
    "RateLimitExceededError",
    "compute_bonus",
    "pick_bucket",
]
