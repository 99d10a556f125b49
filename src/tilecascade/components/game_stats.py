from dataclasses import dataclass


@dataclass(slots=True)
class GameStats:
    """Running totals for the current session; persistence lives elsewhere."""

    score: int = 0
    matches: int = 0
    moves: int = 0
    cascades: int = 0
