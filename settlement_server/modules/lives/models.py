"""Domain models for the lives ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from settlement_server.db import models as orm


@dataclass(slots=True)
class LivesBalance:
    wallet: str
    free_today: int
    bonus_today: int
    paid_bank: int
    last_reset_at: date
    last_claim_at: Optional[date] = None

    @property
    def total(self) -> int:
        return self.free_today + self.bonus_today + self.paid_bank

    @classmethod
    def from_orm(cls, instance: orm.LivesAccount) -> "LivesBalance":
        return cls(
            wallet=instance.wallet,
            free_today=int(instance.free_today or 0),
            bonus_today=int(instance.bonus_today or 0),
            paid_bank=int(instance.paid_bank or 0),
            last_reset_at=instance.last_reset_at,
            last_claim_at=instance.last_claim_at,
        )


@dataclass(slots=True)
class ClaimOutcome:
    balance: LivesBalance
    bonus_lives: int
    token_balance: Decimal
    was_reset: bool
