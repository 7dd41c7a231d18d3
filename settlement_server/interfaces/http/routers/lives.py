"""Lives endpoints: daily claim and balance."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from settlement_server.core.container import ApplicationContainer
from settlement_server.interfaces.http.deps import get_app_container, get_claim_service, get_lives_ledger
from settlement_server.modules.games import GameNotFoundError
from settlement_server.modules.lives import DailyClaimService, LivesBalance, LivesLedger, RateLimitExceededError
from settlement_server.schemas import ClaimDailyRequest, LivesResponse

router = APIRouter()


def _to_schema(balance: LivesBalance) -> LivesResponse:
    return LivesResponse(
        free=balance.free_today,
        bonus=balance.bonus_today,
        paid_bank=balance.paid_bank,
        total=balance.total,
    )


@router.post("/claim-daily", response_model=LivesResponse, summary="Claim today's free life")
async def claim_daily(
    payload: ClaimDailyRequest,
    request: Request,
    container: ApplicationContainer = Depends(get_app_container),
    service: DailyClaimService = Depends(get_claim_service),
):
    try:
        outcome = await service.claim(
            wallet=payload.wallet,
            game_id=payload.game_id or container.settings.default_game_id,
            ip=payload.ip,
            user_agent=request.headers.get("user-agent"),
            device_id=payload.device_id,
        )
    except GameNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RateLimitExceededError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc)) from exc
    return _to_schema(outcome.balance)


@router.get("/{wallet}", response_model=LivesResponse, summary="Current lives of a wallet")
async def get_lives(wallet: str, ledger: LivesLedger = Depends(get_lives_ledger)):
    return _to_schema(await ledger.snapshot(wallet))
