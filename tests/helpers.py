from __future__ import annotations

from typing import Dict, Mapping, Sequence

from munch.components.board import Board
from munch.components.tile import SpecialKind, Tile
from munch.components.tile_source import TileSource
from munch.events.bus import EventBus
from munch.session import Session
from munch.utils.grid import Position

# Background colors laid out so no two neighbouring cells share a color.
BACKGROUND = ['blue', 'green', 'yellow', 'purple']
# Refill colors absent from the background; replayed column by column they never line up.
REFILL = ('red', 'orange', 'white')


def background_color(row: int, col: int) -> str:
    return BACKGROUND[(row + 2 * col) % len(BACKGROUND)]


def make_board(overrides: Mapping[Position, Tile | str] | None = None, size: int = 8) -> Board:
    """Run-free background board with the given cells replaced."""
    rows = [[Tile(background_color(r, c)) for c in range(size)] for r in range(size)]
    for (r, c), tile in (overrides or {}).items():
        rows[r][c] = tile if isinstance(tile, Tile) else Tile(tile)
    return Board.from_rows(rows)


def paint(color: str, *positions: Position, special: SpecialKind = SpecialKind.NONE) -> Dict[Position, Tile]:
    return {pos: Tile(color, special) for pos in positions}


def refill_source(colors: Sequence[str] = REFILL) -> TileSource:
    return TileSource.replaying(colors)


def make_session(board: Board | None = None, **kwargs) -> Session:
    kwargs.setdefault('seed', 0)
    kwargs.setdefault('tile_source', refill_source())
    session = Session(**kwargs)
    if board is not None:
        session.load_board(board)
    return session


def collect(bus: EventBus, name: str) -> list[dict]:
    received: list[dict] = []
    bus.subscribe(name, lambda sender, **payload: received.append(payload))
    return received
