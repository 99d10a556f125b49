import random

from esper import World

from tilecascade.events.bus import EventBus
from tilecascade.components.game_stats import GameStats
from tilecascade.components.generation_stats import GenerationStats
from tilecascade.components.stage_profile import StageRandomProfile
from tilecascade.components.turn_state import TurnState


def create_world(
    event_bus: EventBus,
    *,
    profile: StageRandomProfile | None = None,
    rng: random.Random | None = None,
) -> World:
    """Create the session world with its singleton resources.

    The board entity itself is owned by ``BoardSystem``, which builds it from
    the profile registered here.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    world.create_entity(profile or StageRandomProfile.for_stage(1))
    world.create_entity(GameStats(), GenerationStats(), TurnState())
    return world
