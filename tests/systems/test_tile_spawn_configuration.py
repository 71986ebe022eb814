import random

from munch.events.bus import EventBus
from munch.world import create_world
from munch.systems.board import BoardSystem
from munch.systems.board_ops import get_tile_source, refill_empty_cells, set_spawnable_colors


def _colors(board) -> set[str]:
    return {tile.color for _, tile in board.items() if tile is not None}


def test_board_initialization_respects_spawnable_subset():
    bus = EventBus()
    world = create_world(bus, rng=random.Random(0))
    set_spawnable_colors(world, ["pink", "blue", "green"])

    board = BoardSystem(world, bus)

    assert _colors(board.board) <= {"pink", "blue", "green"}


def test_refill_honors_updated_spawnable_list():
    bus = EventBus()
    world = create_world(bus, rng=random.Random(1))
    board = BoardSystem(world, bus)

    assert set_spawnable_colors(world, ["yellow"]) == ["yellow"]
    holed = board.board.cleared([(0, 0), (3, 4)])
    filled, new_tiles = refill_empty_cells(holed, get_tile_source(world))

    assert new_tiles == [(0, 0), (3, 4)]
    assert {filled.color_at(pos) for pos in new_tiles} == {"yellow"}


def test_unknown_colors_fall_back_to_full_palette():
    bus = EventBus()
    world = create_world(bus, palette={"red": "/r.png", "teal": "/t.png", "gold": "/g.png"})
    assert set_spawnable_colors(world, ["purple"]) == ["red", "teal", "gold"]
    assert get_tile_source(world).colors == ["red", "teal", "gold"]
