"""Daily free-life claim: rate limit, bonus lookup, ledger refresh, event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.modules.events import REWARDS_DAILY_CLAIMED, EventPublisher
from settlement_server.modules.games import GameConfigService
from settlement_server.modules.ratelimit import RateLimiter, claim_key, device_fingerprint

from .bonus import BonusCalculator
from .exceptions import RateLimitExceededError
from .models import ClaimOutcome
from .service import LivesLedger

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DailyClaimService:
    session: AsyncSession
    games: GameConfigService
    ledger: LivesLedger
    limiter: RateLimiter
    bonus: BonusCalculator
    events: EventPublisher

    async def claim(
        self,
        *,
        wallet: str,
        game_id: str,
        ip: str,
        user_agent: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> ClaimOutcome:
        game = await self.games.get_active(game_id)
        rules = game.lives
        # release the connection before the rate limiter and balance lookups
        await self.session.commit()

        fingerprint = device_fingerprint(ip, user_agent or device_id or "")
        allowed = await self.limiter.try_consume(
            claim_key(ip, fingerprint, wallet),
            rules.claim_attempts_per_day,
            rules.claim_window_seconds * 1000,
        )
        if not allowed:
            raise RateLimitExceededError("Too many claim attempts, try again later")

        # looked up before the row lock is taken
        bonus_lives, token_balance = await self.bonus.bonus_for(
            wallet, divisor=rules.bonus_divisor, cap=rules.bonus_cap
        )
        balance, was_reset = await self.ledger.claim_daily(
            wallet,
            bonus_lives,
            daily_grant=rules.daily_free_lives,
            initial_free_lives=rules.initial_free_lives,
        )
        await self.session.commit()

        logger.info(
            "Daily claim for %s on %s: free=%d bonus=%d paid=%d",
            wallet,
            game_id,
            balance.free_today,
            balance.bonus_today,
            balance.paid_bank,
        )
        await self.events.publish(
            REWARDS_DAILY_CLAIMED,
            {
                "wallet": wallet,
                "gameId": game_id,
                "free": balance.free_today,
                "bonus": balance.bonus_today,
                "paidBank": balance.paid_bank,
                "tokenBalance": str(token_balance),
                "wasReset": was_reset,
            },
        )
        return ClaimOutcome(balance=balance, bonus_lives=bonus_lives, token_balance=token_balance, was_reset=was_reset)
