"""Round settlement: validate the replay, spend a life, record the score."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from settlement_server.core.config import Settings
from settlement_server.infrastructure.database.repositories.round_repository import SqlRoundRepository
from settlement_server.modules.events import GAME_COMPLETED, GAME_VALIDATION_FAILED, EventPublisher
from settlement_server.modules.games import GameConfigService
from settlement_server.modules.lives import LivesLedger, NoLivesAvailableError
from settlement_server.modules.validation import ValidatorRegistry, default_registry

from .exceptions import (
    DuplicateRoundError,
    InvalidMoveSequenceError,
    InvalidSubmissionError,
    NoLivesRemainingError,
)
from .models import PlayerStats, RoundSubmission, SettledRound, hash_moves, sha256_hex
from .repository import RoundRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class RoundSettlementService:
    session: AsyncSession
    repository: RoundRepository
    ledger: LivesLedger
    games: GameConfigService
    events: EventPublisher
    validators: ValidatorRegistry = field(default_factory=lambda: default_registry)
    clock: Callable[[], datetime] = field(default=utc_now)

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        *,
        settings: Settings,
        events: EventPublisher,
        validators: ValidatorRegistry = default_registry,
        clock: Callable[[], datetime] = utc_now,
    ) -> "RoundSettlementService":
        return cls(
            session=session,
            repository=SqlRoundRepository(session),
            ledger=LivesLedger.with_session(session, clock),
            games=GameConfigService.with_session(session, settings),
            events=events,
            validators=validators,
            clock=clock,
        )

    async def settle(self, submission: RoundSubmission) -> SettledRound:
        if not submission.wallet or not submission.seed:
            raise InvalidSubmissionError("Missing required fields: wallet, moves, seed")

        game = await self.games.get_for_validation(submission.game_id)
        moves = submission.moves
        if not moves:
            raise InvalidSubmissionError("No moves provided")
        if len(moves) > game.scoring.max_moves:
            raise InvalidSubmissionError(f"Too many moves (max: {game.scoring.max_moves})")

        validator = self.validators.get(game.validation_engine)
        result = validator.validate(moves, submission.seed, game.scoring)
        if not result.valid:
            await self.session.rollback()
            logger.warning(
                "Rejected %s round from %s: %s", game.game_id, submission.wallet, "; ".join(result.errors)
            )
            await self.events.publish(
                GAME_VALIDATION_FAILED,
                {
                    "gameId": game.game_id,
                    "wallet": submission.wallet,
                    "errors": result.errors,
                    "movesCount": len(moves),
                },
            )
            raise InvalidMoveSequenceError(result.errors)

        seed_hash = sha256_hex(submission.seed)
        moves_hash = hash_moves(moves)
        now = self.clock()
        try:
            if await self.repository.replay_exists(
                wallet=submission.wallet, game_id=game.game_id, seed_hash=seed_hash, moves_hash=moves_hash
            ):
                raise DuplicateRoundError()
            try:
                remaining = await self.ledger.consume_one(submission.wallet)
            except NoLivesAvailableError as exc:
                raise NoLivesRemainingError() from exc

            record = await self.repository.add_round(
                game_id=game.game_id,
                wallet=submission.wallet,
                score=result.score,
                game_data=result.game_data,
                moves_hash=moves_hash,
                seed_hash=seed_hash,
                created_at=now,
            )
            await self.repository.record_stats(
                wallet=submission.wallet, game_id=game.game_id, score=result.score, played_at=now
            )
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateRoundError() from exc
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Settled %s round %s for %s: score=%d remaining=%d",
            game.game_id,
            record.id,
            submission.wallet,
            result.score,
            remaining,
        )
        await self.events.publish(
            GAME_COMPLETED,
            {
                "gameId": game.game_id,
                "wallet": submission.wallet,
                "playId": record.id,
                "score": result.score,
                "gameData": result.game_data,
                "remainingLives": remaining,
            },
        )
        return SettledRound(
            play_id=record.id,
            game_id=game.game_id,
            wallet=submission.wallet,
            score=result.score,
            seed_hash=seed_hash,
            game_data=result.game_data,
            remaining_lives=remaining,
        )

    async def stats_for_wallet(self, wallet: str) -> list[PlayerStats]:
        return [PlayerStats.from_orm(row) for row in await self.repository.stats_for_wallet(wallet)]
