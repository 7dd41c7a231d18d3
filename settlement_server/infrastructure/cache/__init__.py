"""Redis-backed short-lived storage."""

from .client import create_redis, rate_limit_key, temp_address_key

__all__ = ["create_redis", "rate_limit_key", "temp_address_key"]
