from __future__ import annotations

import random
from typing import Callable, Optional, Tuple

from tilecascade.components.stage_profile import StageRandomProfile
from tilecascade.components.tile import Cell, Direction, Rock, Rocket, Symbol, Tile, Wildcard

TileGenerator = Callable[[], Tile]

ROCKET_DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)


def is_empty(tile: Cell) -> bool:
    return tile is None


def is_symbol(tile: Cell) -> bool:
    return isinstance(tile, Symbol)


def is_wildcard(tile: Cell) -> bool:
    return isinstance(tile, Wildcard)


def is_rocket(tile: Cell) -> bool:
    return isinstance(tile, Rocket)


def is_rock(tile: Cell) -> bool:
    return isinstance(tile, Rock)


def rocket_direction(tile: Cell) -> Optional[Tuple[int, int]]:
    """Unit vector a rocket flies along, or None for anything else."""
    if isinstance(tile, Rocket):
        return tile.direction.value
    return None


def is_matchable(tile: Cell) -> bool:
    return isinstance(tile, (Symbol, Wildcard))


def is_swappable(tile: Cell) -> bool:
    return tile is not None and not isinstance(tile, Rock)


def compatible(a: Cell, b: Cell) -> bool:
    """Two matchable tiles can share a run if either is a wildcard or the ids agree."""
    if not (is_matchable(a) and is_matchable(b)):
        return False
    if isinstance(a, Wildcard) or isinstance(b, Wildcard):
        return True
    return a == b


def make_generator(
    profile: StageRandomProfile,
    rng: Optional[random.Random] = None,
) -> TileGenerator:
    """Build a tile generator for ``profile``.

    Every call draws independently: rock, then rocket, then wildcard, and
    otherwise a uniform plain symbol.
    """

    rand = rng or random.Random()

    def generate() -> Tile:
        if profile.rock_chance and rand.random() < profile.rock_chance:
            return Rock()
        if profile.rocket_chance and rand.random() < profile.rocket_chance:
            return Rocket(rand.choice(ROCKET_DIRECTIONS))
        if profile.wildcard_chance and rand.random() < profile.wildcard_chance:
            return Wildcard()
        return Symbol(rand.randrange(profile.symbol_count))

    return generate
