import random

import pytest

from tilecascade.components.board import Board
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.components.stage_profile import StageRandomProfile
from tilecascade.components.tile import Direction, Rocket, Symbol
from tilecascade.systems.board_setup import generate_non_matching_board
from tilecascade.systems.cascade import (
    SwapOutcome,
    attempt_swap,
    combo_multiplier,
    find_activated_rockets,
    resolve_step,
    rocket_trajectory,
    validate_swap,
)
from tilecascade.systems.match import find_matches, find_valid_swaps
from tilecascade.systems.tile_rules import make_generator
from tests.helpers import constant_generator, parse_board, unique_symbols

QUIET_BOARD = """
    1 2 3 4
    5 6 7 8
    9 10 11 12
    13 14 15 16
"""


def test_non_adjacent_swap_is_rejected_without_mutation():
    board = parse_board(QUIET_BOARD)
    before = board.clone()
    result = attempt_swap(board, 0, 0, 2, 0, unique_symbols())
    assert result.invalid
    assert result.outcome is SwapOutcome.REJECTED
    assert result.reason == "not_adjacent"
    assert result.score == 0
    assert board == before


@pytest.mark.parametrize(
    "coords,reason",
    [
        ((3, 3, 4, 4), "out_of_bounds"),
        ((-1, 0, 0, 0), "out_of_bounds"),
        ((1, 1, 1, 1), "same_cell"),
    ],
)
def test_bad_coordinates_are_rejected(coords, reason):
    board = parse_board(QUIET_BOARD)
    before = board.clone()
    result = attempt_swap(board, *coords, unique_symbols())
    assert result.outcome is SwapOutcome.REJECTED
    assert result.reason == reason
    assert board == before


def test_rock_swap_is_rejected_even_when_it_would_match():
    board = parse_board("""
        1 1 #
        f f 1
        f f f
    """)
    before = board.clone()
    result = attempt_swap(board, 2, 0, 2, 1, unique_symbols())
    assert result.outcome is SwapOutcome.REJECTED
    assert result.reason == "rock"
    assert board == before


def test_swap_without_match_reverts():
    board = parse_board(QUIET_BOARD)
    before = board.clone()
    result = attempt_swap(board, 1, 1, 2, 2, unique_symbols())
    assert result.invalid
    assert result.outcome is SwapOutcome.NO_MATCH
    assert result.iterations == 0
    assert board == before


def test_diagonal_neighbours_may_swap():
    assert validate_swap(parse_board(QUIET_BOARD), (1, 1), (2, 2)) is None
    assert validate_swap(parse_board(QUIET_BOARD), (1, 1), (0, 2)) is None


def test_four_by_four_single_odd_tile():
    board = Board(4, 4, lambda x, y: Symbol(2) if (x, y) == (3, 3) else Symbol(1))
    result = attempt_swap(board, 2, 3, 3, 3, unique_symbols())
    assert result.outcome is SwapOutcome.RESOLVED
    assert not result.invalid
    first = result.steps[0]
    assert {(0, 0), (1, 0), (2, 0), (3, 0)} <= first.matches
    assert {(3, 0), (3, 1), (3, 2), (3, 3)} <= first.matches
    assert (2, 3) not in first.matches
    assert result.score >= 30
    assert result.score == len(first.matches) * 10
    assert result.board is board
    assert find_matches(board) == set()


def test_rocket_next_to_match_clears_its_line():
    board = parse_board("""
        f f f  f f
        f f f  f f
        f f R^ 3 f
        3 3 f  f f
    """)
    result = attempt_swap(board, 2, 3, 3, 2, unique_symbols())
    assert result.outcome is SwapOutcome.RESOLVED
    assert result.iterations == 1
    step = result.steps[0]
    assert step.matches == {(0, 3), (1, 3), (2, 3)}
    assert step.rockets == ((2, 2),)
    assert step.rocket_cleared == {(2, 2), (2, 1), (2, 0)}
    assert step.removed == step.matches | step.rocket_cleared
    assert step.rocket_points == 50
    assert step.score == 30 + 50 * step.multiplier
    assert result.rocket_cleared_count == 3
    # The whole column was cleared and refilled from the generator.
    assert all(tile.id >= 500 for _, _, tile in board.column(2))
    assert find_matches(board) == set()


def test_rockets_do_not_chain():
    board = parse_board("""
        f  f f f R^
        R> f f f f
        6  6 6 f f
    """)
    matches = find_matches(board)
    step = resolve_step(board, matches, 1, unique_symbols())
    assert step.rockets == ((0, 1),)
    assert step.rocket_cleared == {(0, 1), (1, 1), (2, 1), (3, 1), (4, 1)}
    assert (4, 0) not in step.removed
    # The untouched rocket fell into the cleared cell below it.
    assert board.get(4, 1) == Rocket(Direction.UP)


def test_rocket_helpers():
    board = parse_board("""
        f f f
        f R3 f
        f f f
    """)
    assert find_activated_rockets(board, [(0, 0)]) == [(1, 1)]
    assert find_activated_rockets(board, [(2, 0), (0, 2)]) == [(1, 1)]
    assert rocket_trajectory(board, (1, 1)) == {(1, 1), (2, 2)}
    assert rocket_trajectory(board, (0, 0)) == set()


def test_wildcard_bonus_uses_combo_multiplier():
    board = parse_board("""
        1 W 1
        f f f
        f f f
    """)
    step = resolve_step(board, find_matches(board), 2, unique_symbols())
    assert step.multiplier == pytest.approx(1.1)
    assert step.wildcards == {(1, 0)}
    assert step.base_points == 30
    assert step.wildcard_points == 20
    assert step.score == 55
    assert step.board is not None and step.board is not board
    assert step.board == board


def test_combo_levels_increase_multiplier():
    board = parse_board("""
        2 f f f
        1 f f f
        1 1 f f
        f 2 2 f
    """)
    assert find_matches(board) == set()
    result = attempt_swap(board, 0, 3, 1, 2, unique_symbols())
    assert result.outcome is SwapOutcome.RESOLVED
    assert result.iterations == 2
    first, second = result.steps
    assert first.matches == {(0, 1), (0, 2), (0, 3)}
    assert first.multiplier == 1.0
    assert first.score == 30
    # The 2 from the top of column 0 fell in beside the other two.
    assert second.matches == {(0, 3), (1, 3), (2, 3)}
    assert second.multiplier == pytest.approx(1.1)
    assert second.score == 33
    assert result.score == 63
    assert result.matched_count == 6
    assert find_matches(board) == set()


def test_combo_multiplier_formula():
    assert combo_multiplier(1) == 1.0
    assert combo_multiplier(2) == pytest.approx(1.1)
    assert combo_multiplier(5) == pytest.approx(1.4)


def test_cascade_cap_stops_degenerate_generators():
    board = parse_board("""
        f f f
        f f 1
        1 1 f
    """)
    stats = GenerationStats()
    result = attempt_swap(
        board,
        2,
        1,
        2,
        2,
        constant_generator(Symbol(1)),
        max_refill_attempts=2,
        max_cascades=3,
        stats=stats,
    )
    assert result.outcome is SwapOutcome.RESOLVED
    assert result.iterations == 3
    assert [step.level for step in result.steps] == [1, 2, 3]
    assert stats.count("cascade") == 1
    assert stats.count("refill") > 0


def test_completed_swaps_leave_no_matches():
    rng = random.Random(99)
    generator = make_generator(StageRandomProfile.for_stage(10), rng)
    board = generate_non_matching_board(7, 7, generator, 1000)
    swaps = find_valid_swaps(board)
    assert swaps
    for src, dst in swaps[:15]:
        working = board.clone()
        result = attempt_swap(working, *src, *dst, generator)
        assert not result.invalid
        assert result.score > 0
        assert find_matches(working) == set()
        assert not working.has_empty()
