from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from tilecascade.components.board import Board, LineEntry
from tilecascade.components.tile import Direction, Position, Wildcard
from tilecascade.constants import MIN_MATCH_LENGTH
from tilecascade.systems.tile_rules import is_matchable, is_swappable

MatchSet = Set[Position]

# Forward half of the 8-neighbourhood; each unordered pair is visited once.
_FORWARD_NEIGHBOURS: Tuple[Position, ...] = ((1, 0), (0, 1), (1, 1), (-1, 1))


def scan_line(cells: Iterable[LineEntry]) -> List[List[Position]]:
    """Return every run of at least MIN_MATCH_LENGTH compatible tiles along a line.

    The anchor of a run is its first plain symbol; wildcards fit any anchor.
    Rockets, rocks and empty cells end the current run without joining it.
    When a different symbol ends a run, the trailing wildcards carry over into
    the next run.
    """
    runs: List[List[Position]] = []
    run: List[LineEntry] = []
    anchor = None
    for entry in cells:
        tile = entry[2]
        if not is_matchable(tile):
            _flush(run, runs)
            run = []
            anchor = None
            continue
        if isinstance(tile, Wildcard):
            run.append(entry)
            continue
        if anchor is None or anchor == tile:
            anchor = tile
            run.append(entry)
            continue
        _flush(run, runs)
        carried: List[LineEntry] = []
        for previous in reversed(run):
            if not isinstance(previous[2], Wildcard):
                break
            carried.insert(0, previous)
        run = carried + [entry]
        anchor = tile
    _flush(run, runs)
    return runs


def _flush(run: Sequence[LineEntry], runs: List[List[Position]]) -> None:
    if len(run) >= MIN_MATCH_LENGTH:
        runs.append([(x, y) for x, y, _ in run])


def iter_lines(board: Board) -> Iterator[List[LineEntry]]:
    """Rows, columns, then every maximal diagonal long enough to hold a match."""
    for y in range(board.length):
        yield board.row(y)
    for x in range(board.width):
        yield board.column(x)
    down_right = [(x, 0) for x in range(board.width)] + [(0, y) for y in range(1, board.length)]
    down_left = [(x, 0) for x in range(board.width)] + [
        (board.width - 1, y) for y in range(1, board.length)
    ]
    for direction, starts in ((Direction.DOWN_RIGHT, down_right), (Direction.DOWN_LEFT, down_left)):
        for start_x, start_y in starts:
            line = list(board.diagonal(start_x, start_y, direction))
            if len(line) >= MIN_MATCH_LENGTH:
                yield line


def find_match_runs(board: Board) -> List[List[Position]]:
    runs: List[List[Position]] = []
    for line in iter_lines(board):
        runs.extend(scan_line(line))
    return runs


def find_matches(board: Board) -> MatchSet:
    """Detect every matched coordinate on the board, each reported once."""
    return {pos for run in find_match_runs(board) for pos in run}


def lines_through(board: Board, x: int, y: int) -> List[List[LineEntry]]:
    """The row, column and both diagonals passing through (x, y)."""
    k = min(x, y)
    down_right = list(board.diagonal(x - k, y - k, Direction.DOWN_RIGHT))
    k = min(board.width - 1 - x, y)
    down_left = list(board.diagonal(x + k, y - k, Direction.DOWN_LEFT))
    return [board.row(y), board.column(x), down_right, down_left]


def would_create_match(board: Board, x: int, y: int) -> bool:
    """Return True if the tile at (x, y) belongs to a run on any line through it."""
    if not is_matchable(board.get(x, y)):
        return False
    for line in lines_through(board, x, y):
        for run in scan_line(line):
            if (x, y) in run:
                return True
    return False


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for x, y in board.positions():
        if not is_swappable(board.get(x, y)):
            continue
        for dx, dy in _FORWARD_NEIGHBOURS:
            other = (x + dx, y + dy)
            if not board.in_bounds(*other) or not is_swappable(board.get(*other)):
                continue
            board.swap((x, y), other)
            creates = would_create_match(board, x, y) or would_create_match(board, *other)
            board.swap((x, y), other)
            if creates:
                swaps.append(((x, y), other))
    return swaps
