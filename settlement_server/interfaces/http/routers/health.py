"""Liveness probe."""

from fastapi import APIRouter

from settlement_server import __version__
from settlement_server.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
