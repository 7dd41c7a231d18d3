"""Repository protocol for leaderboard queries."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol


class LeaderboardRepository(Protocol):
    async def top_scores(self, game_id: str, *, since: Optional[datetime], limit: int) -> list[tuple[str, int, int]]:
        """Rows of ``(wallet, best_score, games_played)``, best first."""
        ...
