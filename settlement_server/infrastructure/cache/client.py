"""Redis client factory and centralized key naming."""

from __future__ import annotations

from redis.asyncio import Redis

from settlement_server.core.config import Settings


def create_redis(settings: Settings) -> Redis:
    return Redis.from_url(settings.redis_url, decode_responses=True)


def temp_address_key(address: str) -> str:
    return f"temp_address:{address}"


def rate_limit_key(scope: str, key: str) -> str:
    return f"ratelimit:{scope}:{key}"
