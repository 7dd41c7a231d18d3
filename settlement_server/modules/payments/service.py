"""Payment reconciler: issues receiving addresses and settles transfers exactly once."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.core.config import Settings
from settlement_server.infrastructure.chain import ChainError
from settlement_server.infrastructure.database.repositories.payment_repository import SqlPaymentRepository
from settlement_server.modules.events import PAYMENT_ADDRESS_GENERATED, PAYMENT_COMPLETED, EventPublisher
from settlement_server.modules.games import GameConfigService
from settlement_server.modules.lives import LivesLedger
from settlement_server.modules.lives.policy import utc_midnight

from .address import derive_payment_address, new_nonce
from .exceptions import (
    AddressExpiredError,
    DailyPaidCapReachedError,
    InsufficientAmountError,
    PaymentError,
    PaymentPendingError,
    PaymentVerificationError,
    UnknownOrExpiredAddressError,
)
from .gateway import ChainGateway, PriceFeed, TempAddressStore
from .models import (
    STATUS_SUCCESS,
    PaymentQuote,
    PricingSnapshot,
    SettlementResult,
    TempPaymentAddress,
)
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class PaymentReconciler:
    session: AsyncSession
    repository: PaymentRepository
    ledger: LivesLedger
    games: GameConfigService
    chain: ChainGateway
    price_feed: PriceFeed
    store: TempAddressStore
    events: EventPublisher
    settings: Settings
    clock: Callable[[], datetime] = field(default=utc_now)

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        *,
        settings: Settings,
        chain: ChainGateway,
        price_feed: PriceFeed,
        store: TempAddressStore,
        events: EventPublisher,
        clock: Callable[[], datetime] = utc_now,
    ) -> "PaymentReconciler":
        return cls(
            session=session,
            repository=SqlPaymentRepository(session),
            ledger=LivesLedger.with_session(session, clock),
            games=GameConfigService.with_session(session, settings),
            chain=chain,
            price_feed=price_feed,
            store=store,
            events=events,
            settings=settings,
            clock=clock,
        )

    async def issue(self, wallet: str, game_id: str) -> PaymentQuote:
        now = self.clock()
        game = await self.games.get_active(game_id)
        cap = game.lives.paid_life_cap
        bought_today = await self.repository.lives_bought_since(wallet, utc_midnight(now))
        # nothing to write; release the connection before the network calls
        await self.session.commit()
        if bought_today >= cap:
            raise DailyPaidCapReachedError(cap)

        token_price = await self.price_feed.get_price_usd()
        pricing = PricingSnapshot.quote(token_price, game.payment)
        nonce = new_nonce()
        ttl = self.settings.payments.temp_address_ttl_seconds
        record = TempPaymentAddress(
            address=derive_payment_address(wallet, nonce, self.settings.chain.payment_seed),
            wallet=wallet,
            nonce=nonce,
            game_id=game.game_id,
            pricing=pricing,
            issued_at=now,
            expires_at=now + timedelta(seconds=ttl),
        )
        await self.store.save(record, ttl)
        logger.info("Issued payment address %s for %s on %s", record.address, wallet, game.game_id)

        await self.events.publish(
            PAYMENT_ADDRESS_GENERATED,
            {
                "wallet": wallet,
                "gameId": game.game_id,
                "tempAddress": record.address,
                "expiresAt": record.to_dict()["expiresAt"],
            },
        )
        return PaymentQuote(
            temp_address=record,
            remaining_paid_lives=cap - bought_today,
            payment_enabled=game.payment.enabled,
        )

    async def describe_address(self, address: str) -> TempPaymentAddress:
        record = await self.store.load(address)
        if record is None:
            raise UnknownOrExpiredAddressError(address)
        if record.is_expired(self.clock()):
            await self.store.delete(address)
            raise AddressExpiredError(address)
        return record

    async def settle(
        self,
        signature: str,
        recipient: str,
        amount: Optional[Decimal] = None,
        token: Optional[str] = None,
    ) -> SettlementResult:
        """Credit the lives paid for by ``signature``; repeated deliveries are no-ops."""
        now = self.clock()
        processed = await self.repository.is_processed(signature, now=now)
        await self.session.commit()
        if processed:
            logger.info("Payment %s already processed", signature)
            return SettlementResult.already_processed(signature)

        record = await self.store.load(recipient)
        if record is None or record.is_expired(now):
            # the address is dropped right after a settlement commits
            processed = await self.repository.is_processed(signature, now=now)
            await self.session.commit()
            if processed:
                return SettlementResult.already_processed(signature)
            logger.warning("Payment %s to unknown or expired address %s", signature, recipient)
            raise UnknownOrExpiredAddressError(recipient)

        chain_settings = self.settings.chain
        if token is not None and token not in (chain_settings.token_symbol, chain_settings.token_mint):
            raise PaymentVerificationError(f"Unsupported token {token}")

        chain_amount = await self._verified_amount(signature, recipient, amount)
        tier = record.pricing.classify(chain_amount, self.settings.payments.price_tolerance)
        if tier is None:
            logger.warning("Payment %s of %s is below the cheapest tier", signature, chain_amount)
            raise InsufficientAmountError(chain_amount)
        lives_bought = record.pricing.lives_per_tier[tier]

        try:
            payment = await self.repository.add_payment(
                wallet=record.wallet,
                signature=signature,
                amount=chain_amount,
                token=chain_settings.token_symbol,
                lives_bought=lives_bought,
                tier=tier,
                game_id=record.game_id,
                created_at=now,
            )
            await self.ledger.credit_paid(record.wallet, lives_bought)
            await self.repository.add_marker(
                signature,
                expires_at=now + timedelta(seconds=self.settings.payments.processed_marker_ttl_seconds),
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Payment %s settled concurrently; treating as already processed", signature)
            return SettlementResult.already_processed(signature)

        await self.store.delete(recipient)
        logger.info(
            "Settled payment %s: %s lives (%s tier) for %s", signature, lives_bought, tier, record.wallet
        )
        await self.events.publish(
            PAYMENT_COMPLETED,
            {
                "wallet": record.wallet,
                "gameId": record.game_id,
                "paymentId": payment.id,
                "livesBought": lives_bought,
                "tier": tier,
                "amount": str(chain_amount),
                "token": chain_settings.token_symbol,
                "signature": signature,
            },
        )
        return SettlementResult(
            status=STATUS_SUCCESS,
            signature=signature,
            wallet=record.wallet,
            lives_bought=lives_bought,
            tier=tier,
            payment_id=payment.id,
            amount=chain_amount,
        )

    async def confirm_address(self, address: str) -> list[SettlementResult]:
        """Poll the chain for transfers into ``address`` and settle each of them."""
        await self.describe_address(address)
        chain_settings = self.settings.chain
        try:
            signatures = await asyncio.wait_for(
                self.chain.get_signatures_for_address(address, chain_settings.signatures_poll_limit),
                timeout=chain_settings.confirm_timeout_seconds,
            )
        except (asyncio.TimeoutError, ChainError) as exc:
            raise PaymentPendingError(address, f"Could not list transactions for {address}: {exc}") from exc

        settled: list[SettlementResult] = []
        for signature in signatures:
            try:
                result = await self.settle(signature, address)
            except UnknownOrExpiredAddressError:
                # a previous signature settled and consumed the address
                break
            except PaymentError as exc:
                logger.info("Skipping signature %s for %s: %s", signature, address, exc)
                continue
            settled.append(result)
        return settled

    async def purge_expired_markers(self) -> int:
        count = await self.repository.purge_markers(now=self.clock())
        logger.info("Purged %d expired payment markers", count)
        return count

    async def _verified_amount(self, signature: str, recipient: str, claimed: Optional[Decimal]) -> Decimal:
        chain_settings = self.settings.chain
        try:
            transfer = await asyncio.wait_for(
                self.chain.get_transfer(signature, recipient, chain_settings.token_mint),
                timeout=chain_settings.confirm_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise PaymentPendingError(signature, "Timed out waiting for transaction confirmation") from exc
        except ChainError as exc:
            raise PaymentPendingError(signature, f"Chain lookup failed: {exc}") from exc

        if transfer is None:
            raise PaymentPendingError(signature)
        if not transfer.succeeded:
            raise PaymentVerificationError(f"Transaction {signature} failed on chain")
        if transfer.amount <= 0:
            raise PaymentVerificationError(f"Transaction {signature} did not credit {recipient}")
        if claimed is not None and transfer.amount < claimed:
            raise PaymentVerificationError(
                f"Transaction {signature} moved {transfer.amount}, less than the reported {claimed}"
            )
        return transfer.amount
