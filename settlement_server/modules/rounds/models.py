"""Domain models for settled rounds."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from settlement_server.db import models as orm
from settlement_server.modules.validation import Move


def sha256_hex(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def hash_moves(moves: Sequence[Move]) -> str:
    return sha256_hex(json.dumps([move.to_dict() for move in moves], separators=(",", ":"), sort_keys=True))


@dataclass(slots=True)
class RoundSubmission:
    wallet: str
    game_id: str
    seed: str
    moves: list[Move] = field(default_factory=list)


@dataclass(slots=True)
class SettledRound:
    play_id: str
    game_id: str
    wallet: str
    score: int
    seed_hash: str
    game_data: dict[str, Any]
    remaining_lives: int


@dataclass(slots=True)
class PlayerStats:
    wallet: str
    game_id: str
    games_played: int
    high_score: int
    total_score: int
    last_played_at: Optional[datetime] = None

    @classmethod
    def from_orm(cls, instance: orm.UserGameStats) -> "PlayerStats":
        return cls(
            wallet=instance.wallet,
            game_id=instance.game_id,
            games_played=instance.games_played,
            high_score=instance.high_score,
            total_score=instance.total_score,
            last_played_at=instance.last_played_at,
        )
