from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from tilecascade.components.board import Board
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.components.tile import Position, Tile
from tilecascade.constants import MAX_REFILL_ATTEMPTS
from tilecascade.systems.match import would_create_match
from tilecascade.systems.tile_rules import TileGenerator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    tile: Tile


def compute_gravity_moves(board: Board) -> List[GravityMove]:
    """Moves that compact every column toward the bottom edge, order preserved."""
    moves: List[GravityMove] = []
    for x in range(board.width):
        filled = [(y, tile) for _, y, tile in board.column(x) if tile is not None]
        first_target = board.length - len(filled)
        for index, (original_y, tile) in enumerate(filled):
            target_y = first_target + index
            if original_y != target_y:
                moves.append(GravityMove(source=(x, original_y), target=(x, target_y), tile=tile))
    return moves


def apply_gravity_moves(board: Board, moves: List[GravityMove]) -> None:
    for move in moves:
        board.set(*move.source, None)
    for move in moves:
        board.set(*move.target, move.tile)


def apply_gravity(board: Board) -> bool:
    """Compact each column once; return True if any tile moved."""
    moves = compute_gravity_moves(board)
    apply_gravity_moves(board, moves)
    return bool(moves)


def refill(
    board: Board,
    generator: TileGenerator,
    *,
    max_attempts: int = MAX_REFILL_ATTEMPTS,
    stats: Optional[GenerationStats] = None,
) -> List[Position]:
    """Fill every empty cell, deepest row first, avoiding a match at the placed cell.

    A draw that would put its own cell into a run is redrawn. After
    ``max_attempts`` draws the last one is kept, so the result may still hold
    a match.
    """
    empties = sorted(board.empty_positions(), key=lambda pos: (-pos[1], pos[0]))
    for x, y in empties:
        for _ in range(max(1, max_attempts)):
            board.set(x, y, generator())
            if not would_create_match(board, x, y):
                break
        else:
            logger.warning(
                "Refill at (%d, %d) kept a matching tile after %d attempts", x, y, max_attempts
            )
            if stats is not None:
                stats.record("refill")
    return empties


def apply_full_gravity(
    board: Board,
    generator: TileGenerator,
    *,
    max_attempts: int = MAX_REFILL_ATTEMPTS,
    stats: Optional[GenerationStats] = None,
) -> List[Position]:
    """Compact and refill until nothing moves and no empty cell remains."""
    spawned: List[Position] = []
    while True:
        moved = apply_gravity(board)
        if not moved and not board.has_empty():
            return spawned
        spawned.extend(refill(board, generator, max_attempts=max_attempts, stats=stats))
