from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Tuple, TypeVar

from tilecascade.components.tile import Cell, Direction, Position, Rock, Rocket, Symbol, Wildcard

T = TypeVar("T")
LineEntry = Tuple[int, int, Cell]


class OutOfBounds(IndexError):
    """Raised when a coordinate falls outside the board."""

    def __init__(self, x: int, y: int, width: int, length: int) -> None:
        super().__init__(f"({x}, {y}) is outside a {width}x{length} board")
        self.x = x
        self.y = y


class Board:
    """Rectangular grid of tiles addressed as (x, y).

    ``x`` is the column in ``[0, width)`` and ``y`` the row in ``[0, length)``; row 0
    is the top edge. Empty cells hold ``None``. The board knows nothing about
    matching rules, and its dimensions never change after construction.
    """

    __slots__ = ("_width", "_length", "_cells")

    def __init__(
        self,
        width: int,
        length: int,
        setter: Optional[Callable[[int, int], Cell]] = None,
    ) -> None:
        if width < 1 or length < 1:
            raise ValueError(f"Board dimensions must be positive, got {width}x{length}")
        self._width = width
        self._length = length
        # Column-major: _cells[x][y]
        self._cells: List[List[Cell]] = [
            [setter(x, y) if setter else None for y in range(length)]
            for x in range(width)
        ]

    @property
    def width(self) -> int:
        return self._width

    @property
    def length(self) -> int:
        return self._length

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._length

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self._width, self._length)

    def get(self, x: int, y: int) -> Cell:
        self._check(x, y)
        return self._cells[x][y]

    def set(self, x: int, y: int, tile: Cell) -> None:
        self._check(x, y)
        self._cells[x][y] = tile

    def swap(self, a: Position, b: Position) -> None:
        ax, ay = a
        bx, by = b
        self._check(ax, ay)
        self._check(bx, by)
        self._cells[ax][ay], self._cells[bx][by] = self._cells[bx][by], self._cells[ax][ay]

    def clone(self) -> "Board":
        # Tiles are immutable values, so copying the column lists is a deep copy.
        copy = Board.__new__(Board)
        copy._width = self._width
        copy._length = self._length
        copy._cells = [list(column) for column in self._cells]
        return copy

    def load(self, other: "Board") -> None:
        """Overwrite every cell with the contents of a board of the same size."""
        if (other.width, other.length) != (self._width, self._length):
            raise ValueError(
                f"Cannot load a {other.width}x{other.length} board into {self._width}x{self._length}"
            )
        self._cells = [list(column) for column in other._cells]

    def row(self, y: int) -> List[LineEntry]:
        self._check(0, y)
        return [(x, y, self._cells[x][y]) for x in range(self._width)]

    def column(self, x: int) -> List[LineEntry]:
        self._check(x, 0)
        return [(x, y, self._cells[x][y]) for y in range(self._length)]

    def diagonal(
        self,
        start_x: int,
        start_y: int,
        direction: Direction = Direction.DOWN_RIGHT,
    ) -> Iterator[LineEntry]:
        """Yield cells from the start cell stepping by ``direction`` until the edge."""
        self._check(start_x, start_y)
        return self._walk(start_x, start_y, direction.dx, direction.dy)

    def _walk(self, x: int, y: int, dx: int, dy: int) -> Iterator[LineEntry]:
        while self.in_bounds(x, y):
            yield x, y, self._cells[x][y]
            x += dx
            y += dy

    def map(self, fn: Callable[[int, int, Cell], T]) -> List[List[T]]:
        return [[fn(x, y, cell) for y, cell in enumerate(column)] for x, column in enumerate(self._cells)]

    def subset(self, x1: int, y1: int, x2: int, y2: int) -> List[List[Cell]]:
        """Return columns ``x1..x2`` (exclusive) restricted to rows ``y1..y2`` (exclusive)."""
        for x, y in ((x1, y1), (x2, y2)):
            if not (0 <= x <= self._width and 0 <= y <= self._length):
                raise OutOfBounds(x, y, self._width, self._length)
        return [column[y1:y2] for column in self._cells[x1:x2]]

    def positions(self) -> Iterator[Position]:
        for x in range(self._width):
            for y in range(self._length):
                yield x, y

    def has_empty(self) -> bool:
        return any(cell is None for column in self._cells for cell in column)

    def empty_positions(self) -> List[Position]:
        return [(x, y) for x, y in self.positions() if self._cells[x][y] is None]

    def null_out(self, positions: Iterable[Position]) -> None:
        for x, y in positions:
            self.set(x, y, None)

    def to_rows(self) -> List[List[Cell]]:
        """Row-major dump for renderers; Empty stays ``None``."""
        return [[self._cells[x][y] for x in range(self._width)] for y in range(self._length)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._width == other._width
            and self._length == other._length
            and self._cells == other._cells
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(width={self._width}, length={self._length})"

    def __str__(self) -> str:
        lines = []
        for row in self.to_rows():
            lines.append("[ " + " ".join(_label(cell) for cell in row) + " ]\n")
        return "".join(lines)


def _label(cell: Cell) -> str:
    if cell is None:
        return "X"
    if isinstance(cell, Symbol):
        return str(cell.id)
    if isinstance(cell, Wildcard):
        return "*"
    if isinstance(cell, Rock):
        return "#"
    if isinstance(cell, Rocket):
        return "R" + "".join(part[0] for part in cell.direction.name.split("_"))
    return "?"
