import math

import pytest

from settlement_server.modules.games import ScoringRules
from settlement_server.modules.validation import (
    BaseSequenceValidator,
    GenericValidator,
    Move,
    PuzzleValidator,
    SeededRandom,
    TetrisValidator,
    ValidationResult,
    ValidatorRegistry,
    default_registry,
    register_validator,
    seed_hash,
)
from settlement_server.modules.validation.base import seed_multiplier
from settlement_server.modules.validation.tetris import BOARD_HEIGHT, Piece, shift_piece

from tests.conftest import tetris_moves


def _moves(raw):
    return [Move.from_mapping(item) for item in raw]


def test_seed_hash_matches_known_values():
    assert seed_hash("") == 0
    assert seed_hash("a") == 97
    assert seed_hash("ab") == 97 * 31 + 98


def test_seed_hash_wraps_to_signed_32_bits():
    value = seed_hash("an-extremely-long-seed-string-that-overflows")
    assert -(2**31) <= value < 2**31


def test_seeded_random_is_deterministic():
    first = SeededRandom("round-42")
    second = SeededRandom("round-42")
    assert [first.next_float() for _ in range(50)] == [second.next_float() for _ in range(50)]


def test_seeded_random_first_draw():
    rng = SeededRandom("a")
    assert rng.next_float() == ((97 * 9301 + 49297) % 233280) / 233280


@pytest.mark.parametrize("seed", ["a", "round-42", "zzzzzzzzzzzzzzzz", "ünïcødé"])
def test_seeded_random_stays_in_unit_interval(seed):
    rng = SeededRandom(seed)
    for _ in range(200):
        value = rng()
        assert 0 <= value < 1


def test_rejects_empty_move_log():
    result = TetrisValidator().validate([], "seed", ScoringRules())
    assert not result.valid
    assert result.errors == ["No moves provided"]


def test_rejects_too_many_moves():
    rules = ScoringRules(max_moves=3)
    result = TetrisValidator().validate(_moves(tetris_moves(4)), "seed", rules)
    assert result.errors == ["Too many moves (max: 3)"]


def test_timestamp_errors_reported_per_move():
    raw = tetris_moves(5)
    raw[2]["timestamp"] = raw[1]["timestamp"]
    raw[4]["timestamp"] = raw[0]["timestamp"]
    result = TetrisValidator().validate(_moves(raw), "seed", ScoringRules())
    assert not result.valid
    assert result.errors == ["Invalid timestamp order at move 2", "Invalid timestamp order at move 4"]


def test_timestamp_check_runs_before_unknown_move_types():
    raw = [{"type": "teleport", "timestamp": 10}, {"type": "drop", "timestamp": 5}]
    result = TetrisValidator().validate(_moves(raw), "seed", ScoringRules())
    assert result.errors == ["Invalid timestamp order at move 1"]


def test_unknown_move_type_is_hard_failure():
    raw = [{"type": "drop", "timestamp": 1}, {"type": "teleport", "timestamp": 2}]
    result = TetrisValidator().validate(_moves(raw), "seed", ScoringRules())
    assert not result.valid
    assert result.errors == ["Invalid move sequence: Unknown move type: teleport"]


def test_tetris_replay_is_deterministic():
    moves = _moves(tetris_moves(400))
    first = TetrisValidator().validate(moves, "seed-1", ScoringRules())
    second = TetrisValidator().validate(moves, "seed-1", ScoringRules())
    assert first.valid
    assert first == second
    assert first.game_data["total_moves"] == 400
    assert first.game_data["level"] == first.game_data["lines"] // 10 + 1


def test_tetris_score_follows_seeded_line_clears():
    moves = _moves(tetris_moves(40))
    rng = SeededRandom("seed-2")
    score, lines, level, active = 0, 0, 1, False
    for move in moves:
        if not active:
            rng.next_int(7)
            active = True
        if move.type == "drop":
            cleared = rng.next_int(4)
            lines += cleared
            score += (0, 100, 300, 500, 800)[cleared] * level
            level = lines // 10 + 1
            active = False
    result = TetrisValidator().validate(moves, "seed-2", ScoringRules())
    assert result.score == score
    assert result.game_data == {"level": level, "lines": lines, "total_moves": 40}


def test_generic_validator_scores_moves_with_seed_multiplier():
    moves = _moves([{"type": "flip", "timestamp": index} for index in range(1, 13)])
    rules = ScoringRules(score_per_move=10)
    result = GenericValidator().validate(moves, "memory-seed", rules)
    multiplier = 1 + (abs(seed_hash("memory-seed")) % 100) / 1000
    assert result.valid
    assert result.score == math.floor(12 * 10 * multiplier)
    assert result.game_data["base_score"] == 120
    assert 1.0 <= seed_multiplier("memory-seed") <= 1.099


def test_max_score_bound_rejects_inflated_results():
    moves = _moves([{"type": "flip", "timestamp": index} for index in range(1, 101)])
    result = GenericValidator().validate(moves, "s", ScoringRules(score_per_move=10, max_score=500))
    assert not result.valid
    assert "exceeds maximum of 500" in result.errors[0]


def test_registry_falls_back_to_generic():
    assert isinstance(default_registry.get("tetris"), TetrisValidator)
    assert isinstance(default_registry.get("snake"), GenericValidator)
    assert "snake" not in default_registry


def test_register_validator_decorator_adds_engine():
    registry = ValidatorRegistry(fallback=GenericValidator())

    @register_validator("constant", registry)
    class ConstantValidator(BaseSequenceValidator):
        def simulate(self, moves, seed, rules):
            return ValidationResult.accepted(7, {"total_moves": len(moves)})

    result = registry.get("constant").validate(_moves(tetris_moves(3)), "s", ScoringRules())
    assert result.score == 7
    assert registry.engines() == ["constant"]


def test_down_moves_stop_at_the_bottom_row():
    piece = Piece(type=0, y=BOARD_HEIGHT - 2)
    for _ in range(5):
        shift_piece(piece, "down")
    assert piece.y == BOARD_HEIGHT - 1

    shift_piece(piece, "left")
    assert piece.x == 3


def _solve(correct, timestamp):
    return {"type": "solve", "timestamp": timestamp, "data": {"correct": correct}}


def test_puzzle_scores_solutions_and_penalises_errors():
    moves = _moves(
        [
            _solve(False, 1),
            _solve(True, 2),
            {"type": "hint", "timestamp": 3},
            _solve(False, 4),
            _solve(True, 5),
        ]
    )
    rules = ScoringRules(engine="puzzle", extra={"points_per_solution": 50, "penalty_per_error": 20})

    result = default_registry.get("puzzle").validate(moves, "s", rules)

    assert result.valid
    assert result.score == 80
    assert result.game_data == {"solutions_found": 2, "total_moves": 5}


def test_puzzle_rejects_too_many_solutions():
    moves = _moves([_solve(True, index) for index in range(1, 5)])
    result = PuzzleValidator().validate(moves, "s", ScoringRules(extra={"max_solutions": 3}))
    assert not result.valid
    assert result.errors == ["Too many solutions claimed"]
