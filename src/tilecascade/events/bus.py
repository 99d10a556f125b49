from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"            # payload: x, y


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: x, y
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev=(x,y)
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(x,y), dst=(x,y), reason=str
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(x,y),...], size=int, depth=int
EVENT_ROCKET_ACTIVATED = "rocket_activated"        # payload: rockets=[(x,y),...], positions=[(x,y),...]
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(x,y),...], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(x,y),...], score=int, multiplier=float
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score=int
EVENT_BOARD_RESET = "board_reset"                  # payload: reason=str


# ============================================================================
# SCORE & STAGE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"                  # payload: score=int, delta=int
EVENT_STAGE_PROFILE_CHANGED = "stage_profile_changed"  # payload: profile=StageRandomProfile


# ============================================================================
# DIAGNOSTICS
# ============================================================================
EVENT_GENERATION_EXHAUSTED = "generation_exhausted"    # payload: kind=str, count=int
