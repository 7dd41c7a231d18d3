from fastapi import APIRouter

from settlement_server.interfaces.http.routers import admin, leaderboard, lives, payments, rounds, webhooks


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(rounds.router, prefix="/rounds", tags=["rounds"])
    router.include_router(lives.router, prefix="/lives", tags=["lives"])
    router.include_router(payments.router, prefix="/payments", tags=["payments"])
    router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
    router.include_router(leaderboard.router, prefix="/leaderboard", tags=["leaderboard"])
    router.include_router(admin.router, prefix="/admin", tags=["admin"])
    return router


__all__ = [
    "create_api_router",
]
