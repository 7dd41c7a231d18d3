"""SQLAlchemy-backed repository implementations."""

from .game_repository import SqlGameConfigRepository
from .leaderboard_repository import SqlLeaderboardRepository
from .lives_repository import SqlLivesRepository
from .payment_repository import SqlPaymentRepository
from .round_repository import SqlRoundRepository

__all__ = [
    "SqlGameConfigRepository",
    "SqlLeaderboardRepository",
    "SqlLivesRepository",
    "SqlPaymentRepository",
    "SqlRoundRepository",
]
