"""Token price feed used to quote life tiers in tokens."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

import httpx

logger = logging.getLogger(__name__)


class TokenPriceFeed:
    """Reads the token's USD price from a Jupiter-style price API.

    Any failure degrades to ``fallback_price_usd`` so address issuance keeps
    working while the feed is down.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_url: str,
        mint: str,
        fallback_price_usd: Decimal,
    ) -> None:
        self._client = client
        self._api_url = api_url
        self._mint = mint
        self._fallback = fallback_price_usd

    async def get_price_usd(self) -> Decimal:
        try:
            resp = await self._client.get(self._api_url, params={"ids": self._mint})
            resp.raise_for_status()
            price = resp.json().get("data", {}).get(self._mint, {}).get("price")
            value = Decimal(str(price)) if price is not None else None
        except (httpx.HTTPError, ValueError, InvalidOperation) as exc:
            logger.warning("Token price lookup failed, using fallback %s: %s", self._fallback, exc)
            return self._fallback
        if value is None or value <= 0:
            logger.warning("Token price missing from feed response, using fallback %s", self._fallback)
            return self._fallback
        return value
