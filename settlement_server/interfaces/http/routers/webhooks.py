"""Inbound payment notifications from the chain indexer."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from settlement_server.core.security import verify_webhook_secret
from settlement_server.interfaces.http.deps import get_payment_reconciler
from settlement_server.modules.payments import (
    InsufficientAmountError,
    PaymentPendingError,
    PaymentReconciler,
    PaymentVerificationError,
    UnknownOrExpiredAddressError,
)
from settlement_server.schemas import PaymentWebhookRequest, SettlementResponse

from .payments import settlement_to_schema

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/payments",
    response_model=SettlementResponse,
    dependencies=[Depends(verify_webhook_secret)],
    summary="Settle a reported token transfer",
)
async def payment_webhook(
    payload: PaymentWebhookRequest,
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
):
    try:
        result = await reconciler.settle(payload.signature, payload.recipient, payload.amount, payload.token)
    except UnknownOrExpiredAddressError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (InsufficientAmountError, PaymentVerificationError) as exc:
        logger.warning("Rejected payment webhook %s: %s", payload.signature, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaymentPendingError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return settlement_to_schema(result)
