"""Business rules of the three-bucket ledger."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, Protocol

# free and bonus lives expire at the daily reset, so they are spent first
BUCKET_PRIORITY = ("free_today", "bonus_today", "paid_bank")


class HasBuckets(Protocol):
    free_today: int
    bonus_today: int
    paid_bank: int


def pick_bucket(account: HasBuckets) -> Optional[str]:
    """Name of the bucket the next consumed life is taken from, or ``None``."""
    for bucket in BUCKET_PRIORITY:
        if getattr(account, bucket) > 0:
            return bucket
    return None


def compute_bonus(token_balance: Decimal | float, divisor: int, cap: int) -> int:
    if divisor <= 0 or token_balance <= 0:
        return 0
    return max(0, min(math.floor(Decimal(str(token_balance)) / divisor), cap))


def utc_today(now: datetime) -> date:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).date()


def utc_midnight(now: datetime) -> datetime:
    today = utc_today(now)
    return datetime(today.year, today.month, today.day, tzinfo=timezone.utc)
