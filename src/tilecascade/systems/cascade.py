from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from tilecascade.components.board import Board
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.components.tile import Position, Rocket
from tilecascade.constants import (
    COMBO_STEP,
    MATCH_POINTS,
    MAX_CASCADES,
    MAX_REFILL_ATTEMPTS,
    ROCKET_BONUS_POINTS,
    WILDCARD_BONUS_POINTS,
)
from tilecascade.systems.gravity import GravityMove, apply_full_gravity, compute_gravity_moves
from tilecascade.systems.match import find_matches
from tilecascade.systems.tile_rules import TileGenerator, is_rock, is_wildcard

logger = logging.getLogger(__name__)

_NEIGHBOURHOOD: Tuple[Position, ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)


class SwapOutcome(str, Enum):
    RESOLVED = "resolved"
    # Validation failed; the board was never touched.
    REJECTED = "rejected"
    # The swap was made, produced nothing and was reverted.
    NO_MATCH = "no_match"


@dataclass(slots=True)
class CascadeStep:
    """One match -> effects -> removal -> refill iteration."""

    level: int
    multiplier: float
    matches: FrozenSet[Position]
    wildcards: FrozenSet[Position]
    rockets: Tuple[Position, ...]
    # Cells cleared by rockets that were not already part of the match.
    rocket_cleared: FrozenSet[Position]
    removed: FrozenSet[Position]
    base_points: int
    wildcard_points: int
    rocket_points: int
    score: int
    gravity_moves: List[GravityMove] = field(default_factory=list)
    spawned: List[Position] = field(default_factory=list)
    board: Optional[Board] = None


@dataclass(slots=True)
class CascadeResult:
    outcome: SwapOutcome
    board: Board
    src: Position
    dst: Position
    score: int = 0
    steps: List[CascadeStep] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def invalid(self) -> bool:
        return self.outcome is not SwapOutcome.RESOLVED

    @property
    def iterations(self) -> int:
        return len(self.steps)

    @property
    def matched_count(self) -> int:
        return sum(len(step.matches) for step in self.steps)

    @property
    def wildcard_count(self) -> int:
        return sum(len(step.wildcards) for step in self.steps)

    @property
    def rocket_count(self) -> int:
        return sum(len(step.rockets) for step in self.steps)

    @property
    def rocket_cleared_count(self) -> int:
        return sum(len(step.rocket_cleared) for step in self.steps)

    @property
    def affected(self) -> Set[Position]:
        """Every coordinate cleared at least once during the cascade."""
        return {pos for step in self.steps for pos in step.removed}


def combo_multiplier(level: int) -> float:
    return 1 + COMBO_STEP * (level - 1)


def validate_swap(board: Board, src: Position, dst: Position) -> Optional[str]:
    """Return why a swap is not allowed, or None when it may be attempted."""
    if not (board.in_bounds(*src) and board.in_bounds(*dst)):
        return "out_of_bounds"
    if src == dst:
        return "same_cell"
    if max(abs(src[0] - dst[0]), abs(src[1] - dst[1])) != 1:
        return "not_adjacent"
    src_tile = board.get(*src)
    dst_tile = board.get(*dst)
    if is_rock(src_tile) or is_rock(dst_tile):
        return "rock"
    if src_tile is None or dst_tile is None:
        return "empty"
    return None


def find_activated_rockets(board: Board, matches: Iterable[Position]) -> List[Position]:
    """Rockets in the 8-neighbourhood of any matched cell, in board order."""
    rockets: Set[Position] = set()
    for x, y in matches:
        for dx, dy in _NEIGHBOURHOOD:
            nx, ny = x + dx, y + dy
            if board.in_bounds(nx, ny) and isinstance(board.get(nx, ny), Rocket):
                rockets.add((nx, ny))
    return sorted(rockets)


def rocket_trajectory(board: Board, position: Position) -> Set[Position]:
    """The rocket's own cell plus every cell along its direction up to the edge."""
    rocket = board.get(*position)
    if not isinstance(rocket, Rocket):
        return set()
    return {(x, y) for x, y, _ in board.diagonal(position[0], position[1], rocket.direction)}


def resolve_step(
    board: Board,
    matches: Iterable[Position],
    level: int,
    generator: TileGenerator,
    *,
    max_refill_attempts: int = MAX_REFILL_ATTEMPTS,
    stats: Optional[GenerationStats] = None,
    snapshot: bool = True,
) -> CascadeStep:
    """Score ``matches`` at cascade ``level``, fire rockets, clear and refill ``board``."""
    matched = frozenset(matches)
    multiplier = combo_multiplier(level)
    wildcards = frozenset(pos for pos in matched if is_wildcard(board.get(*pos)))
    rockets = tuple(find_activated_rockets(board, matched))
    blast: Set[Position] = set()
    for rocket in rockets:
        blast |= rocket_trajectory(board, rocket)

    base_points = len(matched) * MATCH_POINTS
    wildcard_points = len(wildcards) * WILDCARD_BONUS_POINTS
    rocket_points = len(rockets) * ROCKET_BONUS_POINTS
    score = round((base_points + wildcard_points) * multiplier) + round(rocket_points * multiplier)

    removed = matched | blast
    board.null_out(removed)
    gravity_moves = compute_gravity_moves(board)
    spawned = apply_full_gravity(board, generator, max_attempts=max_refill_attempts, stats=stats)
    return CascadeStep(
        level=level,
        multiplier=multiplier,
        matches=matched,
        wildcards=wildcards,
        rockets=rockets,
        rocket_cleared=frozenset(blast - matched),
        removed=frozenset(removed),
        base_points=base_points,
        wildcard_points=wildcard_points,
        rocket_points=rocket_points,
        score=score,
        gravity_moves=gravity_moves,
        spawned=spawned,
        board=board.clone() if snapshot else None,
    )


def attempt_swap(
    board: Board,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    generator: TileGenerator,
    *,
    max_refill_attempts: int = MAX_REFILL_ATTEMPTS,
    max_cascades: int = MAX_CASCADES,
    stats: Optional[GenerationStats] = None,
) -> CascadeResult:
    """Swap two adjacent tiles and resolve every cascade it triggers.

    Work happens on a copy; the caller's board only changes when the swap
    produces at least one match, and then holds the settled final state.
    Rejected and unproductive swaps are reported through ``outcome``, never
    raised.
    """
    src, dst = (x1, y1), (x2, y2)
    reason = validate_swap(board, src, dst)
    if reason is not None:
        return CascadeResult(SwapOutcome.REJECTED, board, src, dst, reason=reason)

    working = board.clone()
    working.swap(src, dst)
    matches = find_matches(working)
    if not matches:
        working.swap(src, dst)
        return CascadeResult(SwapOutcome.NO_MATCH, board, src, dst, reason="no_match")

    steps: List[CascadeStep] = []
    level = 1
    while matches:
        if level > max_cascades:
            logger.warning("Cascade stopped after %d levels with matches remaining", max_cascades)
            if stats is not None:
                stats.record("cascade")
            break
        steps.append(
            resolve_step(
                working,
                matches,
                level,
                generator,
                max_refill_attempts=max_refill_attempts,
                stats=stats,
            )
        )
        matches = find_matches(working)
        level += 1

    board.load(working)
    return CascadeResult(
        SwapOutcome.RESOLVED,
        board,
        src,
        dst,
        score=sum(step.score for step in steps),
        steps=steps,
    )
