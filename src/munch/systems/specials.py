from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from munch.components.board import Board
from munch.components.tile import SpecialKind
from munch.utils.grid import Position, block, column_cells, row_cells

Trigger = Tuple[Position, SpecialKind]


@dataclass(frozen=True, slots=True)
class Detonation:
    """Board with a cleared region, before gravity and refill."""
    board: Board
    cleared: FrozenSet[Position]
    triggered: Tuple[Trigger, ...] = ()


def effect_passes(board: Board, pos: Position, kind: Optional[SpecialKind] = None) -> List[Set[Position]]:
    """Clear passes produced by the special at ``pos`` (or by ``kind`` placed there).

    A wrapped tile explodes twice: a 3x3 pass and then a 5x5 pass over the
    same centre. Every pass is clipped to the board.
    """
    if kind is None:
        tile = board.tile_at(pos)
        if tile is None:
            return []
        kind = tile.special
    row, col = pos
    size = board.size
    if kind is SpecialKind.STRIPED_ROW:
        return [set(row_cells(row, size))]
    if kind is SpecialKind.STRIPED_COLUMN:
        return [set(column_cells(col, size))]
    if kind is SpecialKind.WRAPPED:
        return [set(block(pos, 1, size)), set(block(pos, 2, size))]
    if kind is SpecialKind.COLORBOMB:
        color = board.color_at(pos)
        region = set(board.positions_of_color(color)) if color is not None else set()
        region.add(pos)
        return [region]
    return []


def effect_region(board: Board, pos: Position, kind: Optional[SpecialKind] = None) -> Set[Position]:
    region: Set[Position] = set()
    for sweep in effect_passes(board, pos, kind):
        region |= sweep
    return region


def trigger_special(board: Board, pos: Position) -> Tuple[Board, FrozenSet[Position]]:
    """Empty the area of effect of the special at ``pos``.

    Only the region is cleared; gravity and refill belong to the resolver.
    """
    region = frozenset(cell for cell in effect_region(board, pos) if board.tile_at(cell) is not None)
    return board.cleared(region), region


def detonate(
    board: Board,
    seeds: Iterable[Position],
    *,
    spare: Iterable[Position] = (),
    consumed: Iterable[Position] = (),
) -> Detonation:
    """Clear ``seeds`` and every cell reached by specials caught in the blast.

    Each special reached triggers once. ``spare`` cells are never cleared and
    ``consumed`` specials are cleared without triggering. Regions are read
    from the incoming board, so a colorbomb still finds its color.
    """
    spared = set(spare)
    done = set(consumed)
    cleared: Set[Position] = set()
    triggered: List[Trigger] = []
    queue = deque(sorted(set(seeds)))
    while queue:
        pos = queue.popleft()
        if pos in cleared or pos in spared:
            continue
        tile = board.tile_at(pos)
        if tile is None:
            continue
        cleared.add(pos)
        if tile.is_special and pos not in done:
            done.add(pos)
            triggered.append((pos, tile.special))
            queue.extend(sorted(effect_region(board, pos) - cleared))
    return Detonation(board=board.cleared(cleared), cleared=frozenset(cleared), triggered=tuple(triggered))
