"""Ports the reconciler needs from the outside world."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from settlement_server.infrastructure.chain import ConfirmedTransfer

from .models import TempPaymentAddress


class ChainGateway(Protocol):
    async def get_transfer(self, signature: str, recipient: str, mint: str) -> Optional[ConfirmedTransfer]:
        ...

    async def get_signatures_for_address(self, address: str, limit: int = 20) -> list[str]:
        ...

    async def get_token_balance(self, owner: str, mint: str) -> Decimal:
        ...


class PriceFeed(Protocol):
    async def get_price_usd(self) -> Decimal:
        ...


class TempAddressStore(Protocol):
    async def save(self, record: TempPaymentAddress, ttl_seconds: int) -> None:
        ...

    async def load(self, address: str) -> Optional[TempPaymentAddress]:
        ...

    async def delete(self, address: str) -> None:
        ...
