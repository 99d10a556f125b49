from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TurnState:
    """Tracks the in-flight swap so only one cascade runs per board at a time."""

    action_source: Optional[str] = None
    cascade_active: bool = False
    cascade_depth: int = 0
