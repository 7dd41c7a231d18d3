"""Minimal Solana JSON-RPC gateway over httpx.

Only the reads the settlement engine needs are implemented: SPL token
balances, parsed transaction metadata and recent signatures for an address.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from .models import ChainError, ConfirmedTransfer

logger = logging.getLogger(__name__)

RETRY_STATUS = {429, 500, 502, 503, 504}
RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError)


def _ui_amount(entry: dict[str, Any]) -> Decimal:
    token_amount = entry.get("uiTokenAmount") or entry.get("tokenAmount") or {}
    raw = token_amount.get("uiAmountString")
    if raw is None:
        raw = token_amount.get("uiAmount")
    try:
        return Decimal(str(raw)) if raw is not None else Decimal(0)
    except InvalidOperation:
        return Decimal(0)


class SolanaRpcClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        *,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self._client = client
        self._rpc_url = rpc_url
        self._max_retries = max(1, max_retries)
        self._backoff_seconds = backoff_seconds
        self._ids = itertools.count(1)

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        delay = self._backoff_seconds
        for attempt in range(1, self._max_retries + 1):
            try:
                resp = await self._client.post(self._rpc_url, json=payload)
                if resp.status_code in RETRY_STATUS and attempt < self._max_retries:
                    await asyncio.sleep(delay)
                    delay *= 2
                    continue
                return resp
            except RETRYABLE_ERRORS as exc:
                if attempt < self._max_retries:
                    await asyncio.sleep(delay)
                    delay *= 2
                    continue
                raise ChainError(f"RPC network error after {attempt} attempts: {exc}") from exc
        raise ChainError("RPC retries exhausted")

    async def call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        resp = await self._post(payload)
        if resp.status_code != 200:
            raise ChainError(f"RPC {method} failed with HTTP {resp.status_code}")
        try:
            body = resp.json()
        except ValueError as exc:
            raise ChainError(f"RPC {method} returned invalid JSON") from exc
        if body.get("error"):
            raise ChainError(f"RPC {method} error: {body['error']}")
        return body.get("result")

    async def get_token_balance(self, owner: str, mint: str) -> Decimal:
        result = await self.call(
            "getTokenAccountsByOwner",
            [owner, {"mint": mint}, {"encoding": "jsonParsed"}],
        )
        total = Decimal(0)
        for account in (result or {}).get("value", []):
            info = account.get("account", {}).get("data", {}).get("parsed", {}).get("info", {})
            total += _ui_amount(info)
        return total

    async def get_transfer(self, signature: str, recipient: str, mint: str) -> ConfirmedTransfer | None:
        """Return the token movement into ``recipient`` for a confirmed transaction.

        ``None`` means the transaction is not (yet) visible at the configured
        commitment level.
        """
        result = await self.call(
            "getTransaction",
            [
                signature,
                {"encoding": "jsonParsed", "commitment": "confirmed", "maxSupportedTransactionVersion": 0},
            ],
        )
        if not result:
            return None

        meta = result.get("meta") or {}
        pre = {entry.get("accountIndex"): entry for entry in meta.get("preTokenBalances") or []}
        received = Decimal(0)
        sender = None
        for entry in meta.get("postTokenBalances") or []:
            if entry.get("mint") != mint:
                continue
            before = pre.get(entry.get("accountIndex"))
            delta = _ui_amount(entry) - (_ui_amount(before) if before else Decimal(0))
            if entry.get("owner") == recipient and delta > 0:
                received += delta
            elif delta < 0:
                sender = entry.get("owner")

        return ConfirmedTransfer(
            signature=signature,
            recipient=recipient,
            sender=sender,
            mint=mint,
            amount=received,
            succeeded=meta.get("err") is None,
            block_time=result.get("blockTime"),
        )

    async def get_signatures_for_address(self, address: str, limit: int = 20) -> list[str]:
        result = await self.call("getSignaturesForAddress", [address, {"limit": limit}])
        return [item["signature"] for item in result or [] if item.get("err") is None and item.get("signature")]
