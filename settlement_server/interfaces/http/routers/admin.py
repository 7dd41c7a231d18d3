"""Maintenance endpoints called by the scheduler."""

import logging

from fastapi import APIRouter, Depends

from settlement_server.core.container import ApplicationContainer
from settlement_server.core.security import verify_cron_secret
from settlement_server.interfaces.http.deps import (
    get_app_container,
    get_game_config_service,
    get_lives_ledger,
    get_payment_reconciler,
)
from settlement_server.modules.games import GameConfigService, GameNotFoundError
from settlement_server.modules.lives import LivesLedger
from settlement_server.modules.payments import PaymentReconciler
from settlement_server.schemas import MaintenanceResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_cron_secret)])


async def _daily_grant(container: ApplicationContainer, games: GameConfigService) -> int:
    """Accounts are shared across games, so the default game's rules decide the grant."""
    game_id = container.settings.default_game_id
    try:
        game = await games.get_active(game_id)
    except GameNotFoundError:
        logger.warning("Default game %s unavailable, using the configured daily grant", game_id)
        return container.settings.lives.daily_free_lives
    return game.lives.daily_free_lives


@router.post("/reset-midnight", response_model=MaintenanceResponse, summary="Apply the daily reset")
async def reset_midnight(
    container: ApplicationContainer = Depends(get_app_container),
    games: GameConfigService = Depends(get_game_config_service),
    ledger: LivesLedger = Depends(get_lives_ledger),
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
):
    daily_grant = await _daily_grant(container, games)
    accounts_reset = await ledger.reset_daily_all(daily_grant=daily_grant)
    markers_purged = await reconciler.purge_expired_markers()
    logger.info("Midnight maintenance: %d accounts reset, %d markers purged", accounts_reset, markers_purged)
    return MaintenanceResponse(accounts_reset=accounts_reset, markers_purged=markers_purged)
