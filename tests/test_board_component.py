import pytest

from munch.components.board import Board
from munch.components.tile import SpecialKind, Tile
from munch.events.bus import EventBus
from munch.systems.board import BoardSystem
from munch.world import create_world

from helpers import make_board


def test_board_component_exists():
    bus = EventBus(); world = create_world(bus)
    board_system = BoardSystem(world, bus, 6)
    boards = list(world.get_component(Board))
    assert boards, 'Board component missing'
    ent, comp = boards[0]
    assert ent == board_system.board_entity
    assert comp.size == 6 and comp.is_full()


def test_board_rejects_wrong_shape():
    with pytest.raises(ValueError):
        Board(size=8, cells=(None,) * 63)
    with pytest.raises(ValueError):
        Board(size=0, cells=())
    with pytest.raises(ValueError):
        Board.from_rows([[Tile('blue')], [Tile('blue'), Tile('green')]])


def test_transformations_return_new_boards():
    board = make_board()
    original_cells = board.cells
    changed = board.with_tiles({(0, 0): Tile('pink', SpecialKind.WRAPPED)})
    assert board.cells is original_cells
    assert board.tile_at((0, 0)) == Tile('blue')
    assert changed.tile_at((0, 0)) == Tile('pink', SpecialKind.WRAPPED)
    swapped = board.swapped((0, 0), (0, 1))
    assert swapped.tile_at((0, 0)) == board.tile_at((0, 1))
    assert swapped.tile_at((0, 1)) == board.tile_at((0, 0))
    cleared = board.cleared([(1, 1), (2, 2)])
    assert cleared.empty_positions() == [(1, 1), (2, 2)]
    assert not cleared.is_full()
    assert board.is_full()


def test_tile_conversion_keeps_color():
    tile = Tile('pink')
    striped = tile.with_special(SpecialKind.STRIPED_ROW)
    assert striped.color == 'pink'
    assert striped.is_special and striped.special.is_striped
    assert not tile.is_special


def test_commit_refuses_holes():
    bus = EventBus(); world = create_world(bus)
    board_system = BoardSystem(world, bus, 8)
    with pytest.raises(ValueError):
        board_system.commit(make_board().cleared([(0, 0)]))
    with pytest.raises(ValueError):
        board_system.commit(make_board(size=5))
