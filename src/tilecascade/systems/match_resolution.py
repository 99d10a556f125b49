from esper import World

from tilecascade.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_ROCKET_ACTIVATED,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from tilecascade.constants import MAX_CASCADES, MAX_REFILL_ATTEMPTS
from tilecascade.systems.board import reset_board
from tilecascade.systems.cascade import CascadeResult, CascadeStep, attempt_swap
from tilecascade.systems.match import find_valid_swaps
from tilecascade.systems.world_resources import (
    get_board,
    get_game_stats,
    get_generation_stats,
    get_or_create_turn_state,
    report_exhaustion,
    world_generator,
)


class MatchResolutionSystem:
    """Resolves swap requests against the world's board and narrates the cascade.

    Each request runs the whole cascade synchronously, then replays its steps
    on the bus in order so listeners can rebuild intermediate states:
      - tile_swap_invalid for rejected or unproductive swaps
      - tile_swap_valid, then per step cascade_step, match_found,
        rocket_activated, match_cleared, gravity_applied, refill_completed
      - score_changed and cascade_complete once the board is stable
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        reset_on_stalemate: bool = True,
        max_refill_attempts: int = MAX_REFILL_ATTEMPTS,
        max_cascades: int = MAX_CASCADES,
    ):
        self.world = world
        self.event_bus = event_bus
        self.reset_on_stalemate = reset_on_stalemate
        self.max_refill_attempts = max_refill_attempts
        self.max_cascades = max_cascades
        self.last_result: CascadeResult | None = None
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        state = get_or_create_turn_state(self.world)
        if state.cascade_active:
            # One cascade per board at a time.
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason='busy')
            return
        board = get_board(self.world)
        stats = get_generation_stats(self.world)
        before = dict(stats.exhausted)
        state.action_source = 'swap'
        state.cascade_active = True
        state.cascade_depth = 0
        try:
            result = attempt_swap(
                board,
                src[0],
                src[1],
                dst[0],
                dst[1],
                world_generator(self.world),
                max_refill_attempts=self.max_refill_attempts,
                max_cascades=self.max_cascades,
                stats=stats,
            )
            self.last_result = result
            if result.invalid:
                self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=result.reason)
                return
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
            for step in result.steps:
                state.cascade_depth = step.level
                self._emit_step(step)
            report_exhaustion(self.event_bus, stats, before)
            self._record(result)
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=result.iterations, score=result.score)
        finally:
            state.cascade_active = False
            state.cascade_depth = 0
            state.action_source = None
        if self.reset_on_stalemate and not result.invalid and not find_valid_swaps(board):
            reset_board(self.world, self.event_bus, reason='stalemate')

    def _emit_step(self, step: CascadeStep) -> None:
        positions = sorted(step.matches)
        self.event_bus.emit(
            EVENT_CASCADE_STEP,
            depth=step.level,
            positions=positions,
            score=step.score,
            multiplier=step.multiplier,
        )
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=step.level)
        if step.rockets:
            self.event_bus.emit(
                EVENT_ROCKET_ACTIVATED,
                rockets=list(step.rockets),
                positions=sorted(step.rocket_cleared),
            )
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=sorted(step.removed), depth=step.level)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=list(step.gravity_moves))
        if step.spawned:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=list(step.spawned))

    def _record(self, result: CascadeResult) -> None:
        stats = get_game_stats(self.world)
        stats.score += result.score
        stats.matches += result.matched_count
        stats.moves += 1
        stats.cascades += max(0, result.iterations - 1)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=stats.score, delta=result.score)
