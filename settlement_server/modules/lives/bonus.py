"""Bonus lives derived from the wallet's token holdings."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from .policy import compute_bonus

logger = logging.getLogger(__name__)


class TokenBalanceLookup(Protocol):
    async def get_token_balance(self, owner: str, mint: str) -> Decimal:
        ...


@dataclass(slots=True)
class BonusCalculator:
    chain: TokenBalanceLookup
    mint: str
    timeout_seconds: float

    async def token_balance(self, wallet: str) -> Decimal:
        """Balance used for the bonus; any failure or timeout counts as zero."""
        try:
            return await asyncio.wait_for(
                self.chain.get_token_balance(wallet, self.mint),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Token balance lookup timed out for %s; granting no bonus", wallet)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Token balance lookup failed for %s; granting no bonus: %s", wallet, exc)
        return Decimal(0)

    async def bonus_for(self, wallet: str, *, divisor: int, cap: int) -> tuple[int, Decimal]:
        balance = await self.token_balance(wallet)
        return compute_bonus(balance, divisor, cap), balance
