"""Paid life purchase endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from settlement_server.core.container import ApplicationContainer
from settlement_server.interfaces.http.deps import get_app_container, get_payment_reconciler
from settlement_server.modules.games import GameNotFoundError
from settlement_server.modules.payments import (
    AddressExpiredError,
    DailyPaidCapReachedError,
    PaymentPendingError,
    PaymentReconciler,
    SettlementResult,
    UnknownOrExpiredAddressError,
)
from settlement_server.schemas import (
    BuyLifeRequest,
    BuyLifeResponse,
    ConfirmAddressResponse,
    SettlementResponse,
    TempAddressResponse,
)

router = APIRouter()


def settlement_to_schema(result: SettlementResult) -> SettlementResponse:
    return SettlementResponse(
        status=result.status,
        signature=result.signature,
        lives_bought=result.lives_bought,
        tier=result.tier,
        payment_id=result.payment_id,
    )


@router.post("/buy-life", response_model=BuyLifeResponse, summary="Issue a one-off payment address")
async def buy_life(
    payload: BuyLifeRequest,
    container: ApplicationContainer = Depends(get_app_container),
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
):
    try:
        quote = await reconciler.issue(payload.wallet, payload.game_id or container.settings.default_game_id)
    except GameNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except DailyPaidCapReachedError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc)) from exc

    record = quote.temp_address
    return BuyLifeResponse(
        pay_addr=record.address,
        game_id=record.game_id,
        price_in_token=record.pricing.price_in_token,
        price_usd=record.pricing.prices_usd,
        lives_per_tier=record.pricing.lives_per_tier,
        token_price_usd=record.pricing.token_price_usd,
        expires_at=record.to_dict()["expiresAt"],
        remaining_paid_lives=quote.remaining_paid_lives,
        payment_enabled=quote.payment_enabled,
    )


@router.get("/temp-address/{address}", response_model=TempAddressResponse, summary="Look up an issued address")
async def get_temp_address(address: str, reconciler: PaymentReconciler = Depends(get_payment_reconciler)):
    try:
        record = await reconciler.describe_address(address)
    except UnknownOrExpiredAddressError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found or expired") from exc
    except AddressExpiredError as exc:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(exc)) from exc
    return TempAddressResponse.model_validate(record.to_dict())


@router.post("/{address}/confirm", response_model=ConfirmAddressResponse, summary="Poll the chain for a payment")
async def confirm_address(address: str, reconciler: PaymentReconciler = Depends(get_payment_reconciler)):
    try:
        settled = await reconciler.confirm_address(address)
    except UnknownOrExpiredAddressError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AddressExpiredError as exc:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(exc)) from exc
    except PaymentPendingError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return ConfirmAddressResponse(settled=[settlement_to_schema(result) for result in settled])
