"""Domain events published after commit."""

from .publisher import (
    GAME_COMPLETED,
    GAME_VALIDATION_FAILED,
    PAYMENT_ADDRESS_GENERATED,
    PAYMENT_COMPLETED,
    REWARDS_DAILY_CLAIMED,
    DomainEvent,
    EventPublisher,
    RedisEventPublisher,
)

__all__ = [
    "DomainEvent",
    "EventPublisher",
    "GAME_COMPLETED",
    "GAME_VALIDATION_FAILED",
    "PAYMENT_ADDRESS_GENERATED",
    "PAYMENT_COMPLETED",
    "REWARDS_DAILY_CLAIMED",
    "RedisEventPublisher",
]
