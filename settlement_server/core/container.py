"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable

import httpx
from redis.asyncio import Redis

from settlement_server.core.config import Settings, get_settings
from settlement_server.infrastructure.cache import create_redis
from settlement_server.infrastructure.chain import SolanaRpcClient, TokenPriceFeed
from settlement_server.infrastructure.database.session import get_engine
from settlement_server.modules.events import EventPublisher, RedisEventPublisher
from settlement_server.modules.lives import BonusCalculator
from settlement_server.modules.payments.gateway import ChainGateway, PriceFeed, TempAddressStore
from settlement_server.modules.payments.store import RedisTempAddressStore
from settlement_server.modules.ratelimit import RateLimiter
from settlement_server.modules.validation import ValidatorRegistry, default_registry


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ApplicationContainer:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    redis: Redis
    http_client: httpx.AsyncClient
    chain: ChainGateway
    price_feed: PriceFeed
    events: EventPublisher
    temp_addresses: TempAddressStore
    limiter: RateLimiter
    validators: ValidatorRegistry = field(default_factory=lambda: default_registry)
    clock: Callable[[], datetime] = field(default=utc_now)

    @classmethod
    def build(cls, settings: Settings) -> "ApplicationContainer":
        redis = create_redis(settings)
        http_client = httpx.AsyncClient(timeout=settings.chain.request_timeout_seconds)
        return cls(
            settings=settings,
            redis=redis,
            http_client=http_client,
            chain=SolanaRpcClient(http_client, settings.chain.rpc_url, max_retries=settings.chain.max_retries),
            price_feed=TokenPriceFeed(
                http_client,
                api_url=settings.chain.price_api_url,
                mint=settings.chain.token_mint,
                fallback_price_usd=settings.chain.fallback_token_price_usd,
            ),
            events=RedisEventPublisher(
                redis, settings.redis.event_stream, maxlen=settings.redis.event_stream_maxlen
            ),
            temp_addresses=RedisTempAddressStore(redis),
            limiter=RateLimiter(redis, scope="claims"),
        )

    def bonus_calculator(self) -> BonusCalculator:
        return BonusCalculator(
            chain=self.chain,
            mint=self.settings.chain.token_mint,
            timeout_seconds=self.settings.chain.balance_timeout_seconds,
        )

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, etc.) are initialised."""
        get_engine(self.settings)

    async def aclose(self) -> None:
        await self.http_client.aclose()
        await self.redis.aclose()


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer.build(get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]
