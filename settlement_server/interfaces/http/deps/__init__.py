"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .services import (
    get_app_container,
    get_claim_service,
    get_game_config_service,
    get_leaderboard_service,
    get_lives_ledger,
    get_payment_reconciler,
    get_round_service,
)

__all__ = [
    "get_app_container",
    "get_claim_service",
    "get_db_session",
    "get_game_config_service",
    "get_leaderboard_service",
    "get_lives_ledger",
    "get_payment_reconciler",
    "get_round_service",
]
