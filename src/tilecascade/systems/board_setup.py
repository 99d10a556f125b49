from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from typing import Optional, Tuple

from tilecascade.components.board import Board
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.constants import MAX_BOARD_ATTEMPTS
from tilecascade.systems.match import find_matches, find_valid_swaps
from tilecascade.systems.tile_rules import TileGenerator

logger = logging.getLogger(__name__)


def create_board(width: int, length: int, generator: TileGenerator) -> Board:
    return Board(width, length, lambda x, y: generator())


def search_board(
    width: int,
    length: int,
    generator: TileGenerator,
    max_attempts: int = MAX_BOARD_ATTEMPTS,
    *,
    require_valid_swap: bool = False,
) -> Tuple[Board, bool]:
    """Draw whole boards until one is match-free, and optionally playable.

    Returns the board and whether the search ran out of attempts, in which
    case the board is the last one drawn. Touches no shared state.
    """
    for _ in range(max(1, max_attempts)):
        board = create_board(width, length, generator)
        if find_matches(board):
            continue
        if require_valid_swap and not find_valid_swaps(board):
            continue
        return board, False
    return board, True


def _record_exhausted(
    width: int,
    length: int,
    max_attempts: int,
    stats: Optional[GenerationStats],
) -> None:
    logger.warning(
        "No usable %dx%d board after %d attempts, using the last one",
        width,
        length,
        max_attempts,
    )
    if stats is not None:
        stats.record("board")


def generate_non_matching_board(
    width: int,
    length: int,
    generator: TileGenerator,
    max_attempts: int = MAX_BOARD_ATTEMPTS,
    *,
    stats: Optional[GenerationStats] = None,
    require_valid_swap: bool = False,
) -> Board:
    """Draw whole boards until one has no match, keeping the last on exhaustion.

    With ``require_valid_swap`` the board must also offer at least one
    productive swap, so a session never starts or resets into a stalemate.
    """
    board, exhausted = search_board(
        width, length, generator, max_attempts, require_valid_swap=require_valid_swap
    )
    if exhausted:
        _record_exhausted(width, length, max_attempts, stats)
    return board


async def generate_non_matching_board_async(
    width: int,
    length: int,
    generator: TileGenerator,
    max_attempts: int = MAX_BOARD_ATTEMPTS,
    *,
    stats: Optional[GenerationStats] = None,
    require_valid_swap: bool = False,
    executor: Optional[Executor] = None,
) -> Board:
    """Run the board search off the event loop.

    ``stats`` stays on the calling thread; exhaustion is recorded after the
    search returns.
    """
    loop = asyncio.get_running_loop()
    board, exhausted = await loop.run_in_executor(
        executor,
        lambda: search_board(
            width, length, generator, max_attempts, require_valid_swap=require_valid_swap
        ),
    )
    if exhausted:
        _record_exhausted(width, length, max_attempts, stats)
    return board
