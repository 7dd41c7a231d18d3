import asyncio
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis

from settlement_server.core.config import Settings
from settlement_server.core.container import ApplicationContainer
from settlement_server.infrastructure.chain import ConfirmedTransfer
from settlement_server.infrastructure.database.session import (
    dispose_engine,
    get_engine,
    get_session_factory,
    init_db,
)
from settlement_server.main import create_app
from settlement_server.modules.games import GameConfigService
from settlement_server.modules.payments import RedisTempAddressStore
from settlement_server.modules.ratelimit import RateLimiter

TEST_MINT = "TestMint1111111111111111111111111111111111"
WEBHOOK_SECRET = "test-webhook-secret"
CRON_SECRET = "test-cron-secret"


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def publish(self, name: str, payload: dict[str, Any]) -> None:
        self.events.append((name, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> list[dict[str, Any]]:
        return [payload for event, payload in self.events if event == name]


class FakeChain:
    """Scripted chain gateway: transfers, balances and signature lists are set by the test."""

    def __init__(self) -> None:
        self.transfers: dict[str, ConfirmedTransfer] = {}
        self.balances: dict[str, Decimal] = {}
        self.signatures: dict[str, list[str]] = {}
        self.balance_error: Optional[Exception] = None
        self.balance_delay = 0.0
        self.transfer_error: Optional[Exception] = None
        self.transfer_calls = 0

    def add_transfer(self, signature: str, recipient: str, amount: str, *, succeeded: bool = True) -> None:
        self.transfers[signature] = ConfirmedTransfer(
            signature=signature,
            recipient=recipient,
            sender="Payer111",
            mint=TEST_MINT,
            amount=Decimal(amount),
            succeeded=succeeded,
        )
        self.signatures.setdefault(recipient, []).append(signature)

    async def get_transfer(self, signature: str, recipient: str, mint: str) -> Optional[ConfirmedTransfer]:
        self.transfer_calls += 1
        await asyncio.sleep(0)
        if self.transfer_error is not None:
            raise self.transfer_error
        transfer = self.transfers.get(signature)
        if transfer is None:
            return None
        if transfer.recipient != recipient or mint != TEST_MINT:
            return replace(transfer, recipient=recipient, amount=Decimal(0))
        return transfer

    async def get_signatures_for_address(self, address: str, limit: int = 20) -> list[str]:
        return list(self.signatures.get(address, []))[:limit]

    async def get_token_balance(self, owner: str, mint: str) -> Decimal:
        if self.balance_delay:
            await asyncio.sleep(self.balance_delay)
        if self.balance_error is not None:
            raise self.balance_error
        return self.balances.get(owner, Decimal(0))


class FixedPriceFeed:
    def __init__(self, price: str = "0.001") -> None:
        self.price = Decimal(price)

    async def get_price_usd(self) -> Decimal:
        return self.price


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'settlement.db'}"},
        webhook={"secret": WEBHOOK_SECRET},
        cron={"secret": CRON_SECRET},
        chain={
            "token_mint": TEST_MINT,
            "payment_seed": "test-payment-seed",
            "balance_timeout_seconds": 0.2,
            "confirm_timeout_seconds": 0.5,
        },
    )


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def events() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture()
def price_feed() -> FixedPriceFeed:
    return FixedPriceFeed()


@pytest_asyncio.fixture()
async def redis():
    client = FakeAsyncRedis(decode_responses=True)
    await client.flushall()
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture()
async def db_engine(settings):
    await dispose_engine()
    await init_db(settings)
    yield get_engine(settings)
    await dispose_engine()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return get_session_factory()


@pytest_asyncio.fixture()
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def games(session_factory, settings):
    async with session_factory() as session:
        service = GameConfigService.with_session(session, settings)
        await service.save(
            game_id="tetris",
            name="Tetris",
            lives_config={"daily_free_lives": 1, "claim_attempts_per_day": 3, "paid_life_cap": 10},
            scoring_rules={"validation_required": True, "engine": "tetris"},
            payment_config={"enabled": True},
        )
        await service.save(
            game_id="memory",
            name="Memory",
            scoring_rules={"validation_required": True, "engine": "generic", "score_per_move": 10},
        )
        await service.save(game_id="casual", name="Casual", scoring_rules={"validation_required": False})
        await service.save(game_id="retired", name="Retired", active=False)
        await session.commit()


@pytest_asyncio.fixture()
async def container(settings, redis, chain, price_feed, events, clock):
    http_client = httpx.AsyncClient()
    yield ApplicationContainer(
        settings=settings,
        redis=redis,
        http_client=http_client,
        chain=chain,
        price_feed=price_feed,
        events=events,
        temp_addresses=RedisTempAddressStore(redis),
        limiter=RateLimiter(redis, scope="claims"),
        clock=clock,
    )
    await http_client.aclose()


@pytest_asyncio.fixture()
async def client(container, db_engine, games):
    app = create_app(container=container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


def tetris_moves(count: int, start: float = 1000.0) -> list[dict[str, Any]]:
    kinds = [
        {"type": "move", "direction": "left"},
        {"type": "rotate"},
        {"type": "move", "direction": "right"},
        {"type": "drop"},
    ]
    return [dict(kinds[index % len(kinds)], timestamp=start + index * 50) for index in range(count)]
