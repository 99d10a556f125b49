from typing import Optional, Tuple

from esper import World

from tilecascade.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_STAGE_PROFILE_CHANGED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
)
from tilecascade.components.board import Board
from tilecascade.components.stage_profile import StageRandomProfile
from tilecascade.constants import GRID_LENGTH, GRID_WIDTH, MAX_BOARD_ATTEMPTS
from tilecascade.systems.board_setup import generate_non_matching_board
from tilecascade.systems.world_resources import (
    get_board,
    get_generation_stats,
    get_or_create_turn_state,
    report_exhaustion,
    set_profile,
    world_generator,
)


def reset_board(
    world: World,
    event_bus: EventBus,
    reason: str,
    *,
    max_attempts: int = MAX_BOARD_ATTEMPTS,
) -> Board:
    """Replace the board contents with a fresh match-free layout that has a valid swap."""
    board = get_board(world)
    stats = get_generation_stats(world)
    before = dict(stats.exhausted)
    fresh = generate_non_matching_board(
        board.width,
        board.length,
        world_generator(world),
        max_attempts,
        stats=stats,
        require_valid_swap=True,
    )
    board.load(fresh)
    report_exhaustion(event_bus, stats, before)
    event_bus.emit(EVENT_BOARD_RESET, reason=reason)
    return board


class BoardSystem:
    """Owns the board entity and turns tile clicks into swap requests."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        width: int = GRID_WIDTH,
        length: int = GRID_LENGTH,
        *,
        max_attempts: int = MAX_BOARD_ATTEMPTS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.max_attempts = max_attempts
        stats = get_generation_stats(world)
        before = dict(stats.exhausted)
        board = generate_non_matching_board(
            width,
            length,
            world_generator(world),
            max_attempts,
            stats=stats,
            require_valid_swap=True,
        )
        self.board_entity = self.world.create_entity(board)
        report_exhaustion(event_bus, stats, before)
        self.selected: Optional[Tuple[int, int]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_STAGE_PROFILE_CHANGED, self.on_stage_profile_changed)

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def on_tile_click(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        if not self.board.in_bounds(x, y):
            return
        # Input is locked while a cascade resolves.
        if get_or_create_turn_state(self.world).cascade_active:
            return
        if self.selected is None:
            self.selected = (x, y)
            self.event_bus.emit(EVENT_TILE_SELECTED, x=x, y=y)
        elif self.selected == (x, y):
            self.selected = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason='same_tile', prev=(x, y))
        elif self.is_adjacent(self.selected, (x, y)):
            src = self.selected
            self.selected = None
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=(x, y))
        else:
            # Change selection to new tile
            self.selected = (x, y)
            self.event_bus.emit(EVENT_TILE_SELECTED, x=x, y=y)

    @staticmethod
    def is_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        ax, ay = a
        bx, by = b
        return max(abs(ax - bx), abs(ay - by)) == 1

    def on_stage_profile_changed(self, sender, **kwargs):
        profile = kwargs.get('profile')
        if not isinstance(profile, StageRandomProfile):
            return
        set_profile(self.world, profile)
        if self.selected is not None:
            prev = self.selected
            self.selected = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason='board_reset', prev=prev)
        reset_board(self.world, self.event_bus, reason='stage', max_attempts=self.max_attempts)
