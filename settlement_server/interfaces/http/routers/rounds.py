"""Round settlement endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from settlement_server.core.container import ApplicationContainer
from settlement_server.interfaces.http.deps import get_app_container, get_round_service
from settlement_server.modules.games import GameNotFoundError, ValidationNotEnabledError
from settlement_server.modules.rounds import (
    DuplicateRoundError,
    InvalidMoveSequenceError,
    InvalidSubmissionError,
    NoLivesRemainingError,
    RoundSettlementService,
    RoundSubmission,
)
from settlement_server.modules.validation import Move
from settlement_server.schemas import PlayerStatsResponse, PlayerStatsSchema, RoundEndRequest, RoundEndResponse

router = APIRouter()


@router.post("/end", response_model=RoundEndResponse, summary="Settle a finished round")
async def end_round(
    payload: RoundEndRequest,
    container: ApplicationContainer = Depends(get_app_container),
    service: RoundSettlementService = Depends(get_round_service),
):
    submission = RoundSubmission(
        wallet=payload.wallet,
        game_id=payload.game_id or container.settings.default_game_id,
        seed=payload.seed,
        moves=[Move.from_mapping(move.model_dump()) for move in payload.moves],
    )
    try:
        settled = await service.settle(submission)
    except GameNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (ValidationNotEnabledError, InvalidSubmissionError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvalidMoveSequenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(exc), "details": exc.errors},
        ) from exc
    except NoLivesRemainingError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except DuplicateRoundError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return RoundEndResponse(
        score=settled.score,
        play_id=settled.play_id,
        seed_hash=settled.seed_hash,
        game_data=settled.game_data,
        remaining_lives=settled.remaining_lives,
        game_id=settled.game_id,
    )


@router.get("/stats/{wallet}", response_model=PlayerStatsResponse, summary="Per-game stats of a wallet")
async def wallet_stats(wallet: str, service: RoundSettlementService = Depends(get_round_service)):
    stats = await service.stats_for_wallet(wallet)
    return PlayerStatsResponse(
        wallet=wallet,
        stats=[
            PlayerStatsSchema(
                game_id=row.game_id,
                games_played=row.games_played,
                high_score=row.high_score,
                total_score=row.total_score,
                last_played_at=row.last_played_at,
            )
            for row in stats
        ],
    )
