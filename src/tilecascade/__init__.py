from tilecascade.components.board import Board, OutOfBounds
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.components.stage_profile import StageRandomProfile
from tilecascade.components.tile import Direction, Rock, Rocket, Symbol, Wildcard
from tilecascade.systems.board_setup import (
    create_board,
    generate_non_matching_board,
    generate_non_matching_board_async,
)
from tilecascade.systems.cascade import (
    CascadeResult,
    CascadeStep,
    SwapOutcome,
    attempt_swap,
    resolve_step,
)
from tilecascade.systems.gravity import apply_full_gravity, apply_gravity, refill
from tilecascade.systems.match import find_matches, find_valid_swaps
from tilecascade.systems.tile_rules import make_generator

__all__ = [
    "Board",
    "CascadeResult",
    "CascadeStep",
    "Direction",
    "GenerationStats",
    "OutOfBounds",
    "Rock",
    "Rocket",
    "StageRandomProfile",
    "SwapOutcome",
    "Symbol",
    "Wildcard",
    "apply_full_gravity",
    "apply_gravity",
    "attempt_swap",
    "create_board",
    "find_matches",
    "find_valid_swaps",
    "generate_non_matching_board",
    "generate_non_matching_board_async",
    "make_generator",
    "refill",
    "resolve_step",
]
