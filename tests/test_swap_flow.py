from munch.components.tile import SpecialKind, Tile
from munch.events.bus import (
    EVENT_ANIMATION_START,
    EVENT_BOARD_STABLE,
    EVENT_BUSY_CHANGED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_SPECIAL_CREATED,
    EVENT_SPECIAL_TRIGGERED,
    EVENT_TILE_SWAP_FINALIZE,
    EVENT_TILE_SWAP_VALID,
)
from munch.systems.board_ops import find_valid_swaps
from munch.systems.match import SwapOutcome, find_match_groups

from helpers import collect, make_board, make_session, paint

# Events nothing inside the engine subscribes to, so their relative order is fixed.
FLOW_EVENTS = [
    EVENT_BUSY_CHANGED,
    EVENT_TILE_SWAP_VALID,
    EVENT_CASCADE_STEP,
    EVENT_MATCH_FOUND,
    EVENT_ANIMATION_START,
    EVENT_SCORE_CHANGED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_CASCADE_COMPLETE,
    EVENT_BOARD_STABLE,
]


def _record(bus):
    order: list[str] = []
    for name in FLOW_EVENTS:
        bus.subscribe(name, lambda sender, _name=name, **payload: order.append(_name))
    return order


def test_swap_flow_finalizes():
    session = make_session(make_board(paint('pink', (0, 0), (0, 1), (1, 2))))
    order = _record(session.event_bus)
    finalized = collect(session.event_bus, EVENT_TILE_SWAP_FINALIZE)
    assert session.request_swap((0, 2), (1, 2)) is SwapOutcome.RESOLVED
    assert finalized == [{'src': (0, 2), 'dst': (1, 2), 'combo': False}]
    assert order == [
        EVENT_BUSY_CHANGED,
        EVENT_TILE_SWAP_VALID,
        EVENT_CASCADE_STEP,
        EVENT_MATCH_FOUND,
        EVENT_ANIMATION_START,
        EVENT_SCORE_CHANGED,
        EVENT_GRAVITY_APPLIED,
        EVENT_REFILL_COMPLETED,
        EVENT_CASCADE_COMPLETE,
        EVENT_BOARD_STABLE,
        EVENT_BUSY_CHANGED,
    ]


def test_three_run_scores_thirty():
    session = make_session(make_board(paint('pink', (0, 0), (0, 1), (1, 2))))
    cleared = collect(session.event_bus, EVENT_MATCH_CLEARED)
    stable = collect(session.event_bus, EVENT_BOARD_STABLE)
    session.request_swap((0, 2), (1, 2))
    assert cleared[0]['positions'] == [(0, 0), (0, 1), (0, 2)]
    assert cleared[0]['colors'] == [(0, 0, 'pink'), (0, 1, 'pink'), (0, 2, 'pink')]
    assert session.score == 30
    assert stable[-1]['score'] == 30
    assert stable[-1]['board'] == session.board
    assert find_match_groups(session.board) == []
    assert not session.busy


def test_four_run_spawns_striped_row():
    session = make_session(make_board(paint('pink', (0, 0), (0, 1), (0, 3), (1, 2))))
    created = collect(session.event_bus, EVENT_SPECIAL_CREATED)
    assert session.request_swap((0, 2), (1, 2)) is SwapOutcome.RESOLVED
    assert session.board.tile_at((0, 2)) == Tile('pink', SpecialKind.STRIPED_ROW)
    assert created == [{'position': (0, 2), 'kind': SpecialKind.STRIPED_ROW}]
    assert session.score == 30


def test_swapped_tiles_land_before_resolution():
    board = make_board(paint('pink', (0, 0), (0, 1), (1, 2)))
    session = make_session(board)
    seen = []
    session.event_bus.subscribe(
        EVENT_CASCADE_STEP,
        lambda sender, **payload: seen.append(session.board.tile_at((0, 2))),
    )
    session.request_swap((1, 2), (0, 2))
    assert seen == [Tile('pink')]


def test_every_hint_is_a_resolving_swap():
    session = make_session(make_board(paint('pink', (0, 0), (0, 1), (1, 2))))
    hints = find_valid_swaps(session.board)
    assert hints == session.hints()
    assert ((0, 2), (1, 2)) in hints
    assert session.request_swap(*hints[0]) is SwapOutcome.RESOLVED


def test_striped_tile_in_match_reports_trigger():
    board = make_board({
        **paint('pink', (0, 0), (1, 2)),
        (0, 1): Tile('pink', SpecialKind.STRIPED_COLUMN),
    })
    session = make_session(board)
    triggered = collect(session.event_bus, EVENT_SPECIAL_TRIGGERED)
    cleared = collect(session.event_bus, EVENT_MATCH_CLEARED)
    assert session.request_swap((0, 2), (1, 2)) is SwapOutcome.RESOLVED
    assert triggered == [{'position': (0, 1), 'kind': SpecialKind.STRIPED_COLUMN}]
    assert len(cleared[0]['positions']) == 10
