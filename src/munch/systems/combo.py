"""Effects of swapping two special tiles into each other.

Combos skip match detection entirely: the two swapped specials are consumed
and a combined region is cleared. Specials caught in that region still go
off, as they would inside a normal match.
"""
from __future__ import annotations

import random
from typing import Dict, Set

from munch.components.board import Board
from munch.components.tile import SpecialKind, Tile
from munch.systems.specials import Detonation, detonate
from munch.utils.grid import Position, block, column_cells, row_cells

STRIPED_KINDS = (SpecialKind.STRIPED_ROW, SpecialKind.STRIPED_COLUMN)


def is_combo(tile_a: Tile, tile_b: Tile) -> bool:
    """A colorbomb combos with anything; other specials only with each other."""
    if SpecialKind.COLORBOMB in (tile_a.special, tile_b.special):
        return True
    return tile_a.is_special and tile_b.is_special


def cross_region(pos: Position, size: int) -> Set[Position]:
    row, col = pos
    return set(row_cells(row, size)) | set(column_cells(col, size))


def band_region(pos: Position, size: int) -> Set[Position]:
    """Three full rows and three full columns centred on ``pos``.

    Rows or columns that fall off the board are skipped, so a band on an edge
    is two lines wide.
    """
    row, col = pos
    region: Set[Position] = set()
    for offset in (-1, 0, 1):
        region.update(row_cells(row + offset, size))
        region.update(column_cells(col + offset, size))
    return region


def resolve_combo(board: Board, a: Position, b: Position, rng: random.Random) -> Detonation:
    """Clear the region produced by the specials at ``a`` and ``b``.

    ``rng`` picks striped orientations for colorbomb + striped conversions.
    """
    tile_a = board.tile_at(a)
    tile_b = board.tile_at(b)
    if tile_a is None or tile_b is None or not is_combo(tile_a, tile_b):
        raise ValueError(f"No combo between {a} and {b}")
    size = board.size

    if SpecialKind.COLORBOMB in (tile_a.special, tile_b.special):
        return _colorbomb_combo(board, a, b, rng)

    if tile_a.special.is_striped and tile_b.special.is_striped:
        region = cross_region(a, size) | cross_region(b, size)
    elif tile_a.special is SpecialKind.WRAPPED and tile_b.special is SpecialKind.WRAPPED:
        region = set(block(a, 2, size)) | set(block(b, 2, size))
    else:
        # One striped, one wrapped.
        region = band_region(a, size) | band_region(b, size)
    return detonate(board, region | {a, b}, consumed=(a, b))


def _colorbomb_combo(board: Board, a: Position, b: Position, rng: random.Random) -> Detonation:
    tile_a = board.tile_at(a)
    tile_b = board.tile_at(b)
    if tile_a.special is SpecialKind.COLORBOMB and tile_b.special is SpecialKind.COLORBOMB:
        everything = list(board.positions())
        return detonate(board, everything, consumed=everything)

    bomb, other = (a, b) if tile_a.special is SpecialKind.COLORBOMB else (b, a)
    other_tile = board.tile_at(other)
    targets = [pos for pos in board.positions_of_color(other_tile.color) if pos != bomb]

    if other_tile.special is SpecialKind.NONE:
        return detonate(board, targets + [a, b], consumed=(bomb,))

    converted: Dict[Position, Tile] = {}
    for pos in sorted(targets):
        if other_tile.special is SpecialKind.WRAPPED:
            kind = SpecialKind.WRAPPED
        else:
            kind = rng.choice(STRIPED_KINDS)
        converted[pos] = board.tile_at(pos).with_special(kind)
    primed = board.with_tiles(converted)
    return detonate(primed, list(converted) + [bomb], consumed=(bomb,))
