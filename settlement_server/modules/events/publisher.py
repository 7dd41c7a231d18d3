"""At-least-once event publication onto a Redis stream."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

GAME_COMPLETED = "game.completed"
GAME_VALIDATION_FAILED = "game.validation_failed"
PAYMENT_COMPLETED = "payment.completed"
PAYMENT_ADDRESS_GENERATED = "payment.address_generated"
REWARDS_DAILY_CLAIMED = "rewards.daily_claimed"


@dataclass(slots=True)
class DomainEvent:
    name: str
    payload: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_fields(self) -> dict[str, str]:
        return {
            "event": self.name,
            "payload": json.dumps(self.payload, default=str, sort_keys=True),
            "occurred_at": self.occurred_at.isoformat(),
        }


class EventPublisher(Protocol):
    async def publish(self, name: str, payload: dict[str, Any]) -> None:
        ...


class RedisEventPublisher:
    """Appends events to a capped stream. Failures are logged, never raised."""

    def __init__(self, redis: Redis, stream: str, *, maxlen: int = 100_000) -> None:
        self.redis = redis
        self.stream = stream
        self.maxlen = maxlen

    async def publish(self, name: str, payload: dict[str, Any]) -> None:
        event = DomainEvent(name, payload)
        try:
            await self.redis.xadd(self.stream, event.to_fields(), maxlen=self.maxlen, approximate=True)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to publish %s event", name)
            return
        logger.debug("Published %s event to %s", name, self.stream)
