from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from esper import World

from munch.components.board import Board
from munch.components.tile import SpecialKind
from munch.constants import MIN_RUN
from munch.events.bus import (
    EventBus,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from munch.systems.board_ops import predict_swap_creates_match
from munch.systems.cascade_state_utils import get_or_create_cascade_state, resolving
from munch.systems.combo import is_combo
from munch.utils.grid import ORTHOGONAL, Position, in_bounds, is_adjacent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Run:
    cells: Tuple[Position, ...]
    horizontal: bool


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """Cells cleared together, plus the special tile the group leaves behind.

    Groups from one detection pass may share cells; the resolver unions them.
    ``order`` is the discovery index used for tie-breaks.
    """
    cells: FrozenSet[Position]
    spawn_at: Optional[Position] = None
    spawn_kind: SpecialKind = SpecialKind.NONE
    order: int = 0

    def __post_init__(self) -> None:
        if len(self.cells) < MIN_RUN:
            raise ValueError(f"A match group needs at least {MIN_RUN} cells")
        if self.spawn_at is not None and self.spawn_at not in self.cells:
            raise ValueError("spawn_at must be one of the group's cells")

    @property
    def size(self) -> int:
        return len(self.cells)


class SwapOutcome(Enum):
    REJECTED = "rejected"
    REVERTED = "reverted"
    RESOLVED = "resolved"


def find_runs(board: Board) -> List[Run]:
    """Maximal same-color runs of at least MIN_RUN cells.

    Rows are scanned first (top to bottom, left to right), then columns
    (left to right, top to bottom). Empty cells break runs.
    """
    size = board.size
    runs: List[Run] = []
    for horizontal in (True, False):
        for line in range(size):
            run: List[Position] = []
            last_color = None
            for step in range(size):
                pos = (line, step) if horizontal else (step, line)
                color = board.color_at(pos)
                if color is not None and color == last_color:
                    run.append(pos)
                else:
                    if len(run) >= MIN_RUN:
                        runs.append(Run(cells=tuple(run), horizontal=horizontal))
                    run = [pos] if color is not None else []
                    last_color = color
            if len(run) >= MIN_RUN:
                runs.append(Run(cells=tuple(run), horizontal=horizontal))
    return runs


def spawn_for_run(run: Run) -> Tuple[Optional[Position], SpecialKind]:
    length = len(run.cells)
    if length >= 5:
        kind = SpecialKind.COLORBOMB
    elif length == 4:
        kind = SpecialKind.STRIPED_ROW if run.horizontal else SpecialKind.STRIPED_COLUMN
    else:
        return None, SpecialKind.NONE
    return run.cells[length // 2], kind


def _plus_region(board: Board, center: Position) -> Set[Position]:
    color = board.color_at(center)
    region = {center}
    for dr, dc in ORTHOGONAL:
        row, col = center[0] + dr, center[1] + dc
        while in_bounds(row, col, board.size) and board.color_at((row, col)) == color:
            region.add((row, col))
            row += dr
            col += dc
    return region


def _resolve_spawn_conflicts(groups: List[MatchGroup]) -> List[MatchGroup]:
    claims: Dict[Position, List[MatchGroup]] = {}
    for group in groups:
        if group.spawn_at is not None:
            claims.setdefault(group.spawn_at, []).append(group)
    losers: Set[int] = set()
    for contenders in claims.values():
        if len(contenders) < 2:
            continue
        winner = min(contenders, key=lambda g: (-g.size, g.order))
        losers.update(g.order for g in contenders if g is not winner)
    if not losers:
        return groups
    return [
        replace(g, spawn_at=None, spawn_kind=SpecialKind.NONE) if g.order in losers else g
        for g in groups
    ]


def find_match_groups(board: Board) -> List[MatchGroup]:
    """Detect every match group on the board, in discovery order.

    Linear runs come first, then one wrapped group per cell shared by a
    horizontal and a vertical run whose plus-shaped region covers at least
    five cells. A spawn cell claimed by several groups goes to the group with
    the most cells, ties going to the one discovered first.
    """
    runs = find_runs(board)
    if not runs:
        return []
    groups: List[MatchGroup] = []
    horizontal_cells: Set[Position] = set()
    vertical_cells: Set[Position] = set()
    for run in runs:
        spawn_at, spawn_kind = spawn_for_run(run)
        groups.append(MatchGroup(
            cells=frozenset(run.cells),
            spawn_at=spawn_at,
            spawn_kind=spawn_kind,
            order=len(groups),
        ))
        (horizontal_cells if run.horizontal else vertical_cells).update(run.cells)
    for center in sorted(horizontal_cells & vertical_cells):
        region = _plus_region(board, center)
        if len(region) < 5:
            continue
        groups.append(MatchGroup(
            cells=frozenset(region),
            spawn_at=center,
            spawn_kind=SpecialKind.WRAPPED,
            order=len(groups),
        ))
    return _resolve_spawn_conflicts(groups)


def creates_match(board: Board, src: Position, dst: Position) -> bool:
    return predict_swap_creates_match(board, src, dst)


class MatchSystem:
    """Validates swap requests and hands accepted swaps to the board.

    The board is only touched for accepted swaps, so a swap that makes no
    match leaves the committed board exactly as it was.
    """
    def __init__(self, world: World, event_bus: EventBus, board_system):
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.request_swap(tuple(src), tuple(dst))

    def request_swap(self, src: Position, dst: Position) -> SwapOutcome:
        state = get_or_create_cascade_state(self.world)
        if state.resolving:
            return self._reject(src, dst, 'busy')
        board: Board = self.board_system.board
        if not (in_bounds(src[0], src[1], board.size) and in_bounds(dst[0], dst[1], board.size)):
            return self._reject(src, dst, 'out_of_bounds')
        if not is_adjacent(src, dst):
            return self._reject(src, dst, 'not_adjacent')
        tile_a = board.tile_at(src)
        tile_b = board.tile_at(dst)
        if tile_a is None or tile_b is None:
            return self._reject(src, dst, 'empty_cell')
        combo = is_combo(tile_a, tile_b)
        if not combo and not creates_match(board, src, dst):
            logger.debug("Swap %s <-> %s makes no match; reverted", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason='no_match')
            return SwapOutcome.REVERTED
        with resolving(self.world, self.event_bus):
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, combo=combo)
            self.event_bus.emit(EVENT_TILE_SWAP_DO, src=src, dst=dst, combo=combo)
        return SwapOutcome.RESOLVED

    def _reject(self, src, dst, reason: str) -> SwapOutcome:
        logger.info("Swap %s <-> %s rejected: %s", src, dst, reason)
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
        return SwapOutcome.REJECTED
