from __future__ import annotations

import itertools
from typing import Callable, Iterable, Iterator

from tilecascade.components.board import Board
from tilecascade.components.tile import Cell, Direction, Rock, Rocket, Symbol, Tile, Wildcard

ROCKET_TOKENS = {
    "R^": Direction.UP,
    "Rv": Direction.DOWN,
    "R<": Direction.LEFT,
    "R>": Direction.RIGHT,
    "R7": Direction.UP_LEFT,
    "R9": Direction.UP_RIGHT,
    "R1": Direction.DOWN_LEFT,
    "R3": Direction.DOWN_RIGHT,
}


def parse_board(text: str, filler_start: int = 1000) -> Board:
    """Build a board from rows of whitespace separated tokens.

    Tokens: an integer is a symbol, ``W`` a wildcard, ``#`` a rock, ``.`` empty,
    ``R^``/``Rv``/``R<``/``R>`` and numpad diagonals ``R7``/``R9``/``R1``/``R3``
    rockets, and ``f`` a filler symbol that is unique on the board.
    """
    rows = [line.split() for line in text.strip().splitlines() if line.strip()]
    width = len(rows[0])
    assert all(len(row) == width for row in rows), "ragged board text"
    fillers = itertools.count(filler_start)

    def token_to_cell(token: str) -> Cell:
        if token == ".":
            return None
        if token == "W":
            return Wildcard()
        if token == "#":
            return Rock()
        if token == "f":
            return Symbol(next(fillers))
        if token in ROCKET_TOKENS:
            return Rocket(ROCKET_TOKENS[token])
        return Symbol(int(token))

    cells = [[token_to_cell(token) for token in row] for row in rows]
    return Board(width, len(rows), lambda x, y: cells[y][x])


def unique_symbols(start: int = 500) -> Callable[[], Tile]:
    """Generator that never repeats a symbol, so refills cannot match."""
    counter = itertools.count(start)
    return lambda: Symbol(next(counter))


def sequence_generator(tiles: Iterable[Tile]) -> Callable[[], Tile]:
    iterator: Iterator[Tile] = iter(tiles)
    return lambda: next(iterator)


def constant_generator(tile: Tile) -> Callable[[], Tile]:
    return lambda: tile
