from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Direction(Enum):
    """Compass directions as (dx, dy) unit vectors; y grows toward the bottom edge."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP_LEFT = (-1, -1)
    UP_RIGHT = (1, -1)
    DOWN_LEFT = (-1, 1)
    DOWN_RIGHT = (1, 1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


@dataclass(frozen=True, slots=True)
class Symbol:
    """Plain matchable tile; ``id`` indexes the finite symbol set."""

    id: int


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Joins any run of symbols or wildcards."""


@dataclass(frozen=True, slots=True)
class Rocket:
    """Directional tile that clears a line when a neighbouring match resolves.

    Rockets break runs and are never matched themselves.
    """

    direction: Direction


@dataclass(frozen=True, slots=True)
class Rock:
    """Immovable by swap and never matched."""


Tile = Union[Symbol, Wildcard, Rocket, Rock]
# A board cell holds a tile or None for Empty.
Cell = Optional[Tile]
Position = Tuple[int, int]
