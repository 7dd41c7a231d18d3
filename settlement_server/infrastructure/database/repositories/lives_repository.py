"""SQLAlchemy implementation for the lives ledger"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.db.models import LivesAccount


class SqlLivesRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, wallet: str, *, for_update: bool = False) -> LivesAccount | None:
        stmt = select(LivesAccount).where(LivesAccount.wallet == wallet)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(self, wallet: str, *, free_today: int, paid_bank: int, today: date) -> LivesAccount:
        account = LivesAccount(
            wallet=wallet,
            free_today=free_today,
            bonus_today=0,
            paid_bank=paid_bank,
            last_reset_at=today,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(account)
        except IntegrityError:
            # created concurrently by another transaction
            account = await self.get(wallet, for_update=True)
            if account is None:
                raise
        return account

    async def decrement(self, wallet: str, bucket: str) -> LivesAccount | None:
        """Take one unit from ``bucket`` if it is non-empty and return the reloaded account."""
        column = getattr(LivesAccount, bucket)
        stmt = (
            update(LivesAccount)
            .where(LivesAccount.wallet == wallet, column > 0)
            .values({bucket: column - 1, "updated_at": datetime.now(timezone.utc)})
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return None
        return await self.get(wallet, for_update=True)

    async def increment_paid(self, wallet: str, amount: int) -> LivesAccount | None:
        stmt = (
            update(LivesAccount)
            .where(LivesAccount.wallet == wallet)
            .values(paid_bank=LivesAccount.paid_bank + amount, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return None
        return await self.get(wallet, for_update=True)

    async def flush(self) -> None:
        await self.session.flush()

    async def reset_stale(self, *, today: date, daily_grant: int) -> int:
        stmt = (
            update(LivesAccount)
            .where(LivesAccount.last_reset_at < today)
            .values(free_today=daily_grant, last_reset_at=today, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
