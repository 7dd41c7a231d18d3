"""Per-game leaderboards over settled rounds."""

from .models import PERIODS, Leaderboard, LeaderboardEntry, period_start
from .service import LeaderboardService

__all__ = ["PERIODS", "Leaderboard", "LeaderboardEntry", "LeaderboardService", "period_start"]
