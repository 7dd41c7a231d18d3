"""Leaderboard value objects and period windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

PERIODS = ("daily", "weekly", "all")


def period_start(period: str, now: datetime) -> Optional[datetime]:
    """UTC start of the window; ``None`` for all-time. Weeks start on Sunday."""
    if period not in PERIODS:
        raise ValueError(f"Unknown leaderboard period: {period}")
    if period == "all":
        return None
    now = now.astimezone(timezone.utc)
    midnight = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)
    if period == "daily":
        return midnight
    return midnight - timedelta(days=(midnight.weekday() + 1) % 7)


@dataclass(slots=True)
class LeaderboardEntry:
    rank: int
    wallet: str
    score: int
    games_played: int


@dataclass(slots=True)
class Leaderboard:
    game_id: str
    period: str
    entries: list[LeaderboardEntry]
