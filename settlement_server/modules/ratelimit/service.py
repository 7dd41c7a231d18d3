"""Fixed-window counters stored in Redis, shared by every server instance."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from redis.asyncio import Redis

from settlement_server.infrastructure.cache import rate_limit_key

logger = logging.getLogger(__name__)


def device_fingerprint(ip: str, user_agent: str) -> str:
    return hashlib.sha256(f"{ip}{user_agent}".encode("utf-8")).hexdigest()[:16]


def claim_key(ip: str, fingerprint: str, wallet: str) -> str:
    return f"claim:{ip}:{fingerprint}:{wallet}"


@dataclass(slots=True)
class RateLimiter:
    redis: Redis
    scope: str = "default"

    async def try_consume(self, key: str, limit: int, window_ms: int) -> bool:
        """Count one attempt against ``key``; ``False`` once the window holds more than ``limit``.

        The window opens on the first attempt and closes when the key expires.
        """
        if limit <= 0:
            return False
        redis_key = rate_limit_key(self.scope, key)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(redis_key, 0, px=window_ms, nx=True)
            pipe.incr(redis_key)
            _, count = await pipe.execute()

        allowed = int(count) <= limit
        if not allowed:
            logger.warning("Rate limit exceeded for %s (%s/%s)", key, count, limit)
        return allowed

    async def reset(self, key: str) -> None:
        await self.redis.delete(rate_limit_key(self.scope, key))
