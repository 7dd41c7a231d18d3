"""SQLAlchemy implementation for payment records and processed markers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.db.models import PaymentRecord, ProcessedPaymentMarker


class SqlPaymentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def is_processed(self, signature: str, *, now: datetime) -> bool:
        marker = select(ProcessedPaymentMarker.signature).where(
            ProcessedPaymentMarker.signature == signature,
            ProcessedPaymentMarker.expires_at > now,
        )
        record = select(PaymentRecord.id).where(PaymentRecord.signature == signature)
        stmt = select(or_(marker.exists(), record.exists()))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def add_payment(
        self,
        *,
        wallet: str,
        signature: str,
        amount: Decimal,
        token: str,
        lives_bought: int,
        tier: str,
        game_id: str,
        created_at: datetime,
    ) -> PaymentRecord:
        record = PaymentRecord(
            wallet=wallet,
            signature=signature,
            amount=amount,
            token=token,
            lives_bought=lives_bought,
            tier=tier,
            game_id=game_id,
            created_at=created_at,
        )
        self.session.add(record)
        await self.session.flush()
        return record

    async def add_marker(self, signature: str, *, expires_at: datetime) -> None:
        self.session.add(ProcessedPaymentMarker(signature=signature, expires_at=expires_at))
        await self.session.flush()

    async def lives_bought_since(self, wallet: str, since: datetime) -> int:
        stmt = select(func.coalesce(func.sum(PaymentRecord.lives_bought), 0)).where(
            PaymentRecord.wallet == wallet,
            PaymentRecord.created_at >= since,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def purge_markers(self, *, now: datetime) -> int:
        result = await self.session.execute(
            delete(ProcessedPaymentMarker)
            .where(ProcessedPaymentMarker.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
