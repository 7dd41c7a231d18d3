"""Shared fixed-window rate limiting."""

from .service import RateLimiter, claim_key, device_fingerprint

__all__ = ["RateLimiter", "claim_key", "device_fingerprint"]
