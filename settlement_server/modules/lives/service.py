"""Lives ledger: the per-wallet free / bonus / paid balance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.db.models import LivesAccount as LivesAccountModel
from settlement_server.infrastructure.database.repositories.lives_repository import SqlLivesRepository

from .exceptions import LivesAccountMissingError, NoLivesAvailableError
from .models import LivesBalance
from .policy import pick_bucket, utc_today
from .repository import LivesRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class LivesLedger:
    """All mutations lock the account row first, so same-wallet calls serialize."""

    repository: LivesRepository
    clock: Clock = field(default=utc_now)

    @classmethod
    def with_session(cls, session: AsyncSession, clock: Clock = utc_now) -> "LivesLedger":
        return cls(SqlLivesRepository(session), clock)

    def today(self) -> date:
        return utc_today(self.clock())

    async def get_or_create(self, wallet: str, *, initial_free_lives: int = 0) -> LivesBalance:
        account = await self._get_or_create(wallet, initial_free_lives)
        return LivesBalance.from_orm(account)

    async def snapshot(self, wallet: str) -> LivesBalance:
        """Read-only view; unknown wallets report an empty balance."""
        account = await self.repository.get(wallet)
        if account is None:
            return LivesBalance(wallet=wallet, free_today=0, bonus_today=0, paid_bank=0, last_reset_at=self.today())
        return LivesBalance.from_orm(account)

    async def claim_daily(
        self,
        wallet: str,
        bonus_lives: int,
        *,
        daily_grant: int = 1,
        initial_free_lives: int = 0,
    ) -> tuple[LivesBalance, bool]:
        """Grant today's free life and refresh the bonus bucket.

        Returns the new balance and whether the daily reset fired.
        """
        today = self.today()
        account = await self._get_or_create(wallet, initial_free_lives)

        was_reset = False
        if account.last_reset_at < today:
            account.free_today = daily_grant
            account.last_reset_at = today
            was_reset = True
        elif account.free_today == 0 and account.last_claim_at != today:
            account.free_today = daily_grant

        # recomputed from the live token balance, never accumulated
        account.bonus_today = max(0, bonus_lives)
        account.last_claim_at = today
        await self.repository.flush()
        return LivesBalance.from_orm(account), was_reset

    async def consume_one(self, wallet: str) -> int:
        """Spend one life (free, then bonus, then paid) and return the lives left."""
        account = await self.repository.get(wallet, for_update=True)
        if account is None:
            raise NoLivesAvailableError(wallet)

        bucket = pick_bucket(account)
        if bucket is None or account.free_today + account.bonus_today + account.paid_bank <= 0:
            raise NoLivesAvailableError(wallet)
        account = await self.repository.decrement(wallet, bucket)
        if account is None:
            raise NoLivesAvailableError(wallet)

        logger.debug("Consumed one %s life for %s", bucket, wallet)
        return account.free_today + account.bonus_today + account.paid_bank

    async def credit_paid(self, wallet: str, amount: int) -> LivesBalance:
        if amount <= 0:
            raise ValueError("credit amount must be positive")
        account = await self.repository.increment_paid(wallet, amount)
        if account is None:
            await self.repository.create(wallet, free_today=0, paid_bank=0, today=self.today())
            account = await self.repository.increment_paid(wallet, amount)
        if account is None:
            raise LivesAccountMissingError(wallet)
        return LivesBalance.from_orm(account)

    async def reset_daily_all(self, *, daily_grant: int = 1) -> int:
        """Apply the midnight reset to every account not yet reset today."""
        count = await self.repository.reset_stale(today=self.today(), daily_grant=daily_grant)
        logger.info("Daily reset applied to %d lives accounts", count)
        return count

    async def _get_or_create(self, wallet: str, initial_free_lives: int) -> LivesAccountModel:
        account = await self.repository.get(wallet, for_update=True)
        if account is None:
            account = await self.repository.create(
                wallet,
                free_today=initial_free_lives,
                paid_bank=0,
                today=self.today(),
            )
            logger.info("Created lives account for %s", wallet)
        return account
