"""Domain models for paid lives."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from settlement_server.modules.games.models import TIERS, PaymentRules

STATUS_SUCCESS = "success"
STATUS_ALREADY_PROCESSED = "already_processed"


def to_epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


@dataclass(slots=True)
class PricingSnapshot:
    """Tier prices frozen at issuance; settlement classifies against these."""

    token_price_usd: Decimal
    prices_usd: dict[str, Decimal]
    price_in_token: dict[str, int]
    lives_per_tier: dict[str, int]

    @classmethod
    def quote(cls, token_price_usd: Decimal, rules: PaymentRules) -> "PricingSnapshot":
        if token_price_usd <= 0:
            raise ValueError("token price must be positive")
        return cls(
            token_price_usd=token_price_usd,
            prices_usd=dict(rules.prices_usd),
            price_in_token={tier: math.ceil(rules.prices_usd[tier] / token_price_usd) for tier in TIERS},
            lives_per_tier=dict(rules.lives_per_tier),
        )

    def classify(self, amount: Decimal, tolerance: Decimal) -> Optional[str]:
        """Highest tier whose token price, less the tolerance, is covered by ``amount``."""
        for tier in reversed(TIERS):
            if amount >= Decimal(self.price_in_token[tier]) * tolerance:
                return tier
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokenPriceUsd": str(self.token_price_usd),
            "pricesUsd": {tier: str(price) for tier, price in self.prices_usd.items()},
            "priceInToken": dict(self.price_in_token),
            "livesPerTier": dict(self.lives_per_tier),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PricingSnapshot":
        return cls(
            token_price_usd=Decimal(data["tokenPriceUsd"]),
            prices_usd={tier: Decimal(price) for tier, price in data["pricesUsd"].items()},
            price_in_token={tier: int(price) for tier, price in data["priceInToken"].items()},
            lives_per_tier={tier: int(lives) for tier, lives in data["livesPerTier"].items()},
        )


@dataclass(slots=True)
class TempPaymentAddress:
    address: str
    wallet: str
    nonce: int
    game_id: str
    pricing: PricingSnapshot
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "wallet": self.wallet,
            "nonce": self.nonce,
            "gameId": self.game_id,
            "pricing": self.pricing.to_dict(),
            "timestamp": to_epoch_ms(self.issued_at),
            "expiresAt": to_epoch_ms(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TempPaymentAddress":
        return cls(
            address=data["address"],
            wallet=data["wallet"],
            nonce=int(data["nonce"]),
            game_id=data["gameId"],
            pricing=PricingSnapshot.from_dict(data["pricing"]),
            issued_at=from_epoch_ms(int(data["timestamp"])),
            expires_at=from_epoch_ms(int(data["expiresAt"])),
        )


@dataclass(slots=True)
class PaymentQuote:
    temp_address: TempPaymentAddress
    remaining_paid_lives: int
    payment_enabled: bool = True


@dataclass(slots=True)
class SettlementResult:
    status: str
    signature: str
    wallet: Optional[str] = None
    lives_bought: int = 0
    tier: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[Decimal] = None

    @classmethod
    def already_processed(cls, signature: str) -> "SettlementResult":
        return cls(status=STATUS_ALREADY_PROCESSED, signature=signature)


@dataclass(slots=True)
class PaymentReceipt:
    """Row written for every settled payment."""

    id: str
    wallet: str
    signature: str
    amount: Decimal
    token: str
    lives_bought: int
    tier: str
    game_id: str
    created_at: Optional[datetime] = field(default=None)

    @classmethod
    def from_orm(cls, instance: Any) -> "PaymentReceipt":
        return cls(
            id=instance.id,
            wallet=instance.wallet,
            signature=instance.signature,
            amount=Decimal(instance.amount),
            token=instance.token,
            lives_bought=instance.lives_bought,
            tier=instance.tier,
            game_id=instance.game_id,
            created_at=instance.created_at,
        )
