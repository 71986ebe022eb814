import random
from typing import Dict, Optional

from esper import World

from munch.components.score import Score
from munch.components.cascade_state import CascadeState
from munch.components.tile_palette import TilePalette
from munch.components.tile_palette_registry import TilePaletteRegistry
from munch.components.tile_source import TileSource
from munch.constants import DEFAULT_MONSTERS, POINTS_PER_TILE
from munch.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    *,
    rng: random.Random | None = None,
    palette: Optional[Dict[str, str]] = None,
    points_per_tile: int = POINTS_PER_TILE,
    tile_source: TileSource | None = None,
) -> World:
    """Build the session world with its singleton resources.

    ``rng`` drives board generation, refills and striped orientations; pass a
    seeded generator (or a ``tile_source`` replaying fixed colors) to make a
    game reproducible.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    # Single registry entity with the canonical monster colors
    tile_palette = TilePalette(assets=dict(palette or DEFAULT_MONSTERS))
    world.create_entity(TilePaletteRegistry(), tile_palette)

    if tile_source is None:
        tile_source = TileSource(rng=world.random, colors=tile_palette.spawnable_colors())
    world.create_entity(tile_source)

    world.create_entity(Score(per_tile=points_per_tile))
    world.create_entity(CascadeState())
    return world
