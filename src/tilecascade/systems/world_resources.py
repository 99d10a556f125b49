from typing import Dict

from esper import World

from tilecascade.events.bus import EventBus, EVENT_GENERATION_EXHAUSTED
from tilecascade.components.board import Board
from tilecascade.components.game_stats import GameStats
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.components.stage_profile import StageRandomProfile
from tilecascade.components.turn_state import TurnState
from tilecascade.systems.tile_rules import TileGenerator, make_generator


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found; create a BoardSystem first")


def get_profile(world: World) -> StageRandomProfile:
    for _, profile in world.get_component(StageRandomProfile):
        return profile
    raise RuntimeError("StageRandomProfile not found")


def set_profile(world: World, profile: StageRandomProfile) -> None:
    for entity, _ in world.get_component(StageRandomProfile):
        world.add_component(entity, profile)
        return
    world.create_entity(profile)


def world_generator(world: World) -> TileGenerator:
    """Tile generator for the current profile drawing from the world's RNG."""
    return make_generator(get_profile(world), getattr(world, "random", None))


def get_game_stats(world: World) -> GameStats:
    existing = list(world.get_component(GameStats))
    if existing:
        return existing[0][1]
    world.create_entity(GameStats())
    return list(world.get_component(GameStats))[0][1]


def get_generation_stats(world: World) -> GenerationStats:
    existing = list(world.get_component(GenerationStats))
    if existing:
        return existing[0][1]
    world.create_entity(GenerationStats())
    return list(world.get_component(GenerationStats))[0][1]


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def report_exhaustion(event_bus: EventBus, stats: GenerationStats, before: Dict[str, int]) -> None:
    """Emit one event per fallback kind whose counter moved since ``before``."""
    for kind, count in stats.exhausted.items():
        if count > before.get(kind, 0):
            event_bus.emit(EVENT_GENERATION_EXHAUSTED, kind=kind, count=count)
