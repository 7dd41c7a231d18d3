"""Redis storage for issued payment addresses."""

from __future__ import annotations

import json
import logging
from typing import Optional

from redis.asyncio import Redis

from settlement_server.infrastructure.cache import temp_address_key

from .models import TempPaymentAddress

logger = logging.getLogger(__name__)


class RedisTempAddressStore:
    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    async def save(self, record: TempPaymentAddress, ttl_seconds: int) -> None:
        await self.redis.set(temp_address_key(record.address), json.dumps(record.to_dict()), ex=ttl_seconds)

    async def load(self, address: str) -> Optional[TempPaymentAddress]:
        raw = await self.redis.get(temp_address_key(address))
        if raw is None:
            return None
        try:
            return TempPaymentAddress.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.error("Discarding unreadable temp address record for %s", address)
            await self.delete(address)
            return None

    async def delete(self, address: str) -> None:
        await self.redis.delete(temp_address_key(address))
