"""Deterministic one-off receiving addresses."""

from __future__ import annotations

import hashlib
import secrets
import time

from solders.keypair import Keypair


def new_nonce() -> int:
    return time.time_ns() // 1_000_000 * 1000 + secrets.randbelow(1000)


def derive_payment_address(wallet: str, nonce: int, payment_seed: str) -> str:
    """Public key of the ed25519 keypair seeded from ``wallet``, ``nonce`` and the server seed."""
    digest = hashlib.sha256(f"{wallet}-{nonce}-{payment_seed}".encode("utf-8")).digest()
    return str(Keypair.from_seed(digest).pubkey())
