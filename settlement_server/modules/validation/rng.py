"""Deterministic seed-driven number generator shared with the game clients.

The string hash mirrors a 32-bit ``h = h * 31 + c`` fold over UTF-16 code
units, and the step function is the classic ``(h * 9301 + 49297) % 233280``
linear congruential generator. The state is reduced with a non-negative
modulo, so every draw lies in ``[0, 1)``.
"""

from __future__ import annotations

import struct

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str) -> tuple[int, ...]:
    encoded = text.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(encoded) // 2}H", encoded)


def seed_hash(seed: str) -> int:
    """Fold ``seed`` into a signed 32-bit integer."""
    value = 0
    for unit in _utf16_units(seed):
        value = _to_int32((value << 5) - value + unit)
    return value


class SeededRandom:
    """Float sequence generator; identical seeds yield identical sequences."""

    __slots__ = ("_state",)

    def __init__(self, seed: str) -> None:
        self._state = seed_hash(seed)

    def next_float(self) -> float:
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def next_int(self, upper: int) -> int:
        """Draw an integer in ``[0, upper)``."""
        return int(self.next_float() * upper)

    __call__ = next_float
