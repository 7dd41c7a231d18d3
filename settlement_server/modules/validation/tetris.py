"""Server-side Tetris replay.

Line clears are drawn from the seeded sequence instead of being derived from
board geometry; the board is carried for shape only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from settlement_server.modules.games.models import ScoringRules

from .base import BaseSequenceValidator, InvalidMoveError
from .models import Move, ValidationResult
from .rng import SeededRandom

BOARD_WIDTH = 10
BOARD_HEIGHT = 20
PIECE_TYPES = 7
SPAWN_X = 4
LINE_SCORES = (0, 100, 300, 500, 800)
LINES_PER_LEVEL = 10


@dataclass(slots=True)
class Piece:
    type: int
    x: int = SPAWN_X
    y: int = 0
    rotation: int = 0


@dataclass(slots=True)
class TetrisState:
    board: list[list[int]] = field(
        default_factory=lambda: [[0] * BOARD_WIDTH for _ in range(BOARD_HEIGHT)]
    )
    score: int = 0
    level: int = 1
    lines: int = 0
    current_piece: Optional[Piece] = None


def shift_piece(piece: Piece, direction: Optional[str]) -> None:
    """Move the piece one cell, staying inside the board."""
    if direction == "left" and piece.x > 0:
        piece.x -= 1
    elif direction == "right" and piece.x < BOARD_WIDTH - 1:
        piece.x += 1
    elif direction == "down" and piece.y < BOARD_HEIGHT - 1:
        piece.y += 1


class TetrisValidator(BaseSequenceValidator):
    def simulate(self, moves: Sequence[Move], seed: str, rules: ScoringRules) -> ValidationResult:
        state = TetrisState()
        rng = SeededRandom(seed)
        for move in moves:
            self._apply(state, move, rng)
        return ValidationResult.accepted(
            state.score,
            {"level": state.level, "lines": state.lines, "total_moves": len(moves)},
        )

    def _apply(self, state: TetrisState, move: Move, rng: SeededRandom) -> None:
        if state.current_piece is None:
            state.current_piece = Piece(type=rng.next_int(PIECE_TYPES))

        if move.type == "move":
            shift_piece(state.current_piece, move.direction)
        elif move.type == "rotate":
            state.current_piece.rotation = (state.current_piece.rotation + 1) % 4
        elif move.type == "drop":
            self._drop(state, rng)
        else:
            raise InvalidMoveError(f"Unknown move type: {move.type}")

    @staticmethod
    def _drop(state: TetrisState, rng: SeededRandom) -> None:
        cleared = rng.next_int(len(LINE_SCORES) - 1)
        state.lines += cleared
        if cleared > 0:
            state.score += LINE_SCORES[cleared] * state.level
        state.level = state.lines // LINES_PER_LEVEL + 1
        state.current_piece = None
