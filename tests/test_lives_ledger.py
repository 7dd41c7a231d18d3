import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from settlement_server.db.models import LivesAccount
from settlement_server.modules.lives import (
    LivesAccountMissingError,
    LivesLedger,
    NoLivesAvailableError,
    compute_bonus,
    pick_bucket,
)
from settlement_server.modules.lives.models import LivesBalance


async def _credit(session_factory, clock, wallet, *, free=0, bonus=0, paid=0):
    async with session_factory() as session:
        ledger = LivesLedger.with_session(session, clock)
        await ledger.get_or_create(wallet, initial_free_lives=free)
        if bonus:
            await ledger.claim_daily(wallet, bonus, daily_grant=free)
        if paid:
            await ledger.credit_paid(wallet, paid)
        await session.commit()


async def _snapshot(session_factory, clock, wallet) -> LivesBalance:
    async with session_factory() as session:
        return await LivesLedger.with_session(session, clock).snapshot(wallet)


async def _consume(session_factory, clock, wallet) -> int:
    async with session_factory() as session:
        remaining = await LivesLedger.with_session(session, clock).consume_one(wallet)
        await session.commit()
        return remaining


def test_pick_bucket_priority():
    assert pick_bucket(LivesBalance("w", 1, 1, 1, None)) == "free_today"
    assert pick_bucket(LivesBalance("w", 0, 1, 1, None)) == "bonus_today"
    assert pick_bucket(LivesBalance("w", 0, 0, 1, None)) == "paid_bank"
    assert pick_bucket(LivesBalance("w", 0, 0, 0, None)) is None


@pytest.mark.parametrize(
    "balance,expected",
    [
        (Decimal(0), 0),
        (Decimal("49999"), 0),
        (Decimal("50000"), 1),
        (Decimal("175000.5"), 3),
        (Decimal("10000000"), 40),
        (Decimal(-5), 0),
    ],
)
def test_compute_bonus_is_floored_and_capped(balance, expected):
    assert compute_bonus(balance, 50_000, 40) == expected


async def test_consumption_order_free_then_bonus_then_paid(session_factory, clock):
    await _credit(session_factory, clock, "wallet-a", free=1, bonus=1, paid=1)

    assert await _consume(session_factory, clock, "wallet-a") == 2
    balance = await _snapshot(session_factory, clock, "wallet-a")
    assert (balance.free_today, balance.bonus_today, balance.paid_bank) == (0, 1, 1)

    assert await _consume(session_factory, clock, "wallet-a") == 1
    balance = await _snapshot(session_factory, clock, "wallet-a")
    assert (balance.free_today, balance.bonus_today, balance.paid_bank) == (0, 0, 1)

    assert await _consume(session_factory, clock, "wallet-a") == 0
    with pytest.raises(NoLivesAvailableError):
        await _consume(session_factory, clock, "wallet-a")


async def test_consume_without_account_raises(session_factory, clock):
    with pytest.raises(NoLivesAvailableError):
        await _consume(session_factory, clock, "ghost")


async def test_conservation_over_mixed_operations(session_factory, clock):
    await _credit(session_factory, clock, "wallet-b", free=1, bonus=2)
    await _credit(session_factory, clock, "wallet-b", paid=3)
    before = (await _snapshot(session_factory, clock, "wallet-b")).total

    consumed = 0
    for _ in range(4):
        await _consume(session_factory, clock, "wallet-b")
        consumed += 1
    await _credit(session_factory, clock, "wallet-b", paid=2)

    after = await _snapshot(session_factory, clock, "wallet-b")
    assert after.total == before + 2 - consumed
    assert min(after.free_today, after.bonus_today, after.paid_bank) >= 0


async def test_concurrent_consumption_never_overdraws(session_factory, clock):
    await _credit(session_factory, clock, "wallet-c", free=1, paid=2)

    results = await asyncio.gather(
        *[_consume(session_factory, clock, "wallet-c") for _ in range(8)],
        return_exceptions=True,
    )
    successes = [item for item in results if isinstance(item, int)]
    failures = [item for item in results if isinstance(item, NoLivesAvailableError)]
    assert len(successes) == 3
    assert len(failures) == 5
    assert sorted(successes) == [0, 1, 2]

    balance = await _snapshot(session_factory, clock, "wallet-c")
    assert balance.total == 0


async def test_claim_daily_grants_once_per_day(session_factory, clock):
    async with session_factory() as session:
        ledger = LivesLedger.with_session(session, clock)
        balance, was_reset = await ledger.claim_daily("wallet-d", 2, daily_grant=1)
        await session.commit()
    assert not was_reset
    assert (balance.free_today, balance.bonus_today) == (1, 2)

    await _consume(session_factory, clock, "wallet-d")
    async with session_factory() as session:
        balance, _ = await LivesLedger.with_session(session, clock).claim_daily("wallet-d", 2, daily_grant=1)
        await session.commit()
    # already claimed today, so the spent free life is not refilled
    assert balance.free_today == 0
    assert balance.bonus_today == 2


async def test_bonus_is_replaced_not_accumulated(session_factory, clock):
    for bonus in (5, 3):
        async with session_factory() as session:
            balance, _ = await LivesLedger.with_session(session, clock).claim_daily("wallet-e", bonus)
            await session.commit()
    assert balance.bonus_today == 3


async def test_claim_across_midnight_resets_free_lives(session_factory, clock):
    await _credit(session_factory, clock, "wallet-f", free=1)
    await _consume(session_factory, clock, "wallet-f")

    clock.advance(hours=13)
    async with session_factory() as session:
        balance, was_reset = await LivesLedger.with_session(session, clock).claim_daily(
            "wallet-f", 0, daily_grant=1
        )
        await session.commit()
    assert was_reset
    assert balance.free_today == 1
    assert balance.last_reset_at == clock().date()


async def test_reset_daily_all_only_touches_stale_accounts(session_factory, clock):
    await _credit(session_factory, clock, "stale-1", free=0)
    await _credit(session_factory, clock, "stale-2", free=0)
    clock.advance(days=1)
    await _credit(session_factory, clock, "fresh", free=0)

    async with session_factory() as session:
        count = await LivesLedger.with_session(session, clock).reset_daily_all(daily_grant=1)
        await session.commit()
    assert count == 2

    assert (await _snapshot(session_factory, clock, "stale-1")).free_today == 1
    assert (await _snapshot(session_factory, clock, "fresh")).free_today == 0


async def test_credit_paid_creates_account(session_factory, clock):
    async with session_factory() as session:
        balance = await LivesLedger.with_session(session, clock).credit_paid("new-wallet", 3)
        await session.commit()
    assert balance.paid_bank == 3
    assert balance.total == 3


async def test_concurrent_claims_create_one_account(session_factory, clock):
    async def claim():
        async with session_factory() as session:
            balance, _ = await LivesLedger.with_session(session, clock).claim_daily(
                "wallet-h", 1, daily_grant=2
            )
            await session.commit()
            return balance

    balances = await asyncio.gather(*[claim() for _ in range(6)])
    assert all(balance.free_today == 2 for balance in balances)

    async with session_factory() as session:
        count = await session.execute(
            select(func.count()).select_from(LivesAccount).where(LivesAccount.wallet == "wallet-h")
        )
        assert count.scalar() == 1

    balance = await _snapshot(session_factory, clock, "wallet-h")
    assert (balance.free_today, balance.bonus_today, balance.paid_bank) == (2, 1, 0)
    assert balance.total == 3


async def test_consume_refreshes_loaded_account(session, clock):
    ledger = LivesLedger.with_session(session, clock)
    await ledger.get_or_create("wallet-i", initial_free_lives=1)
    await ledger.credit_paid("wallet-i", 1)

    assert await ledger.consume_one("wallet-i") == 1
    account = await session.get(LivesAccount, "wallet-i")
    assert (account.free_today, account.paid_bank) == (0, 1)


class _VanishingRepository:
    """Accepts writes but never finds the account again."""

    async def increment_paid(self, wallet, amount):
        return None

    async def create(self, wallet, *, free_today, paid_bank, today):
        return None


async def test_credit_paid_raises_when_account_cannot_be_reloaded(clock):
    ledger = LivesLedger(_VanishingRepository(), clock)
    with pytest.raises(LivesAccountMissingError):
        await ledger.credit_paid("ghost", 1)
