from __future__ import annotations

from dataclasses import dataclass

from tilecascade.constants import (
    DEFAULT_SYMBOL_COUNT,
    ROCK_CHANCE,
    ROCK_FROM_STAGE,
    ROCKET_CHANCE,
    ROCKET_FROM_STAGE,
    WILDCARD_CHANCE,
    WILDCARD_FROM_STAGE,
)


@dataclass(frozen=True, slots=True)
class StageRandomProfile:
    """Generation probabilities supplied by whoever owns stage progression.

    The engine turns a profile into a tile generator and never mutates it or
    reads stage numbers itself.
    """

    symbol_count: int = DEFAULT_SYMBOL_COUNT
    wildcard_chance: float = 0.0
    rocket_chance: float = 0.0
    rock_chance: float = 0.0

    def __post_init__(self) -> None:
        if self.symbol_count < 1:
            raise ValueError(f"symbol_count must be at least 1, got {self.symbol_count}")
        for name in ("wildcard_chance", "rocket_chance", "rock_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    @classmethod
    def for_stage(cls, stage: int) -> "StageRandomProfile":
        """Default progression: wildcards, rockets and rocks unlock at later stages."""
        return cls(
            symbol_count=DEFAULT_SYMBOL_COUNT,
            wildcard_chance=WILDCARD_CHANCE if stage >= WILDCARD_FROM_STAGE else 0.0,
            rocket_chance=ROCKET_CHANCE if stage >= ROCKET_FROM_STAGE else 0.0,
            rock_chance=ROCK_CHANCE if stage >= ROCK_FROM_STAGE else 0.0,
        )
