from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class GenerationStats:
    """Counts best-effort fallbacks taken when a retry cap was exhausted.

    Kinds: ``refill`` (a refilled cell kept a matching draw), ``board`` (initial
    board search gave up) and ``cascade`` (cascade loop hit its cap).
    """

    exhausted: Dict[str, int] = field(default_factory=dict)

    def record(self, kind: str) -> int:
        self.exhausted[kind] = self.exhausted.get(kind, 0) + 1
        return self.exhausted[kind]

    def count(self, kind: str) -> int:
        return self.exhausted.get(kind, 0)

    @property
    def total(self) -> int:
        return sum(self.exhausted.values())
