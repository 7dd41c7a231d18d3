"""Leaderboard endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from settlement_server.interfaces.http.deps import get_leaderboard_service
from settlement_server.modules.games import GameNotFoundError
from settlement_server.modules.leaderboard import LeaderboardService
from settlement_server.schemas import LeaderboardEntrySchema, LeaderboardResponse

router = APIRouter()


@router.get("/{game_id}", response_model=LeaderboardResponse, summary="Best scores per wallet")
async def get_leaderboard(
    game_id: str,
    period: str = Query("daily", pattern="^(daily|weekly|all)$"),
    limit: int = Query(10, ge=1, le=100),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    try:
        board = await service.top(game_id, period=period, limit=limit)
    except GameNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return LeaderboardResponse(
        game_id=board.game_id,
        period=board.period,
        entries=[
            LeaderboardEntrySchema(
                rank=entry.rank, wallet=entry.wallet, score=entry.score, games_played=entry.games_played
            )
            for entry in board.entries
        ],
    )
