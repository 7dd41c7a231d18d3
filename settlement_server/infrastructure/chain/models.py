"""Value objects returned by the chain gateway."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


class ChainError(Exception):
    """Raised when the RPC node or price API cannot answer."""


@dataclass(slots=True, frozen=True)
class ConfirmedTransfer:
    signature: str
    recipient: str
    sender: Optional[str]
    mint: str
    amount: Decimal
    succeeded: bool
    block_time: Optional[int] = None
