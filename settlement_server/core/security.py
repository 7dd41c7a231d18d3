"""Shared-secret checks for the payment webhook and the cron endpoints."""
import hmac
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from settlement_server.core.config import Settings, get_settings

cron_bearer = HTTPBearer(auto_error=False)


def secrets_match(provided: Optional[str], expected: str) -> bool:
    if not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def verify_webhook_secret(request: Request, settings: Settings = Depends(get_settings)) -> None:
    provided = request.headers.get(settings.webhook.header)
    if not secrets_match(provided, settings.webhook_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


async def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(cron_bearer),
    settings: Settings = Depends(get_settings),
) -> None:
    token = credentials.credentials if credentials else None
    if not secrets_match(token, settings.cron_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
