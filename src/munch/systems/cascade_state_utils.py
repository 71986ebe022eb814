from contextlib import contextmanager
from typing import Iterator

from esper import World

from munch.components.cascade_state import CascadeState
from munch.events.bus import EventBus, EVENT_BUSY_CHANGED


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]


def is_busy(world: World) -> bool:
    return get_or_create_cascade_state(world).resolving


@contextmanager
def resolving(world: World, event_bus: EventBus) -> Iterator[CascadeState]:
    """Hold the busy flag for the duration of one resolution.

    The flag is dropped even when a step raises, so the session never stays
    locked.
    """
    state = get_or_create_cascade_state(world)
    state.resolving = True
    state.depth = 0
    state.steps = 0
    event_bus.emit(EVENT_BUSY_CHANGED, busy=True)
    try:
        yield state
    finally:
        state.resolving = False
        event_bus.emit(EVENT_BUSY_CHANGED, busy=False)
