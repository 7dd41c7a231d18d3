"""Service providers wired from the request session and the app container."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.core.container import ApplicationContainer
from settlement_server.modules.games import GameConfigService
from settlement_server.modules.leaderboard import LeaderboardService
from settlement_server.modules.lives import DailyClaimService, LivesLedger
from settlement_server.modules.payments import PaymentReconciler
from settlement_server.modules.rounds import RoundSettlementService

from .database import get_db_session


def get_app_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_game_config_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> GameConfigService:
    return GameConfigService.with_session(db, container.settings)


def get_lives_ledger(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> LivesLedger:
    return LivesLedger.with_session(db, container.clock)


def get_round_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> RoundSettlementService:
    return RoundSettlementService.with_session(
        db,
        settings=container.settings,
        events=container.events,
        validators=container.validators,
        clock=container.clock,
    )


def get_claim_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> DailyClaimService:
    return DailyClaimService(
        session=db,
        games=GameConfigService.with_session(db, container.settings),
        ledger=LivesLedger.with_session(db, container.clock),
        limiter=container.limiter,
        bonus=container.bonus_calculator(),
        events=container.events,
    )


def get_payment_reconciler(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> PaymentReconciler:
    return PaymentReconciler.with_session(
        db,
        settings=container.settings,
        chain=container.chain,
        price_feed=container.price_feed,
        store=container.temp_addresses,
        events=container.events,
        clock=container.clock,
    )


def get_leaderboard_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> LeaderboardService:
    return LeaderboardService.with_session(db, container.settings, container.clock)


__all__ = [
    "get_app_container",
    "get_claim_service",
    "get_game_config_service",
    "get_leaderboard_service",
    "get_lives_ledger",
    "get_payment_reconciler",
    "get_round_service",
]
