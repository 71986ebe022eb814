from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from esper import World

from munch.components.board import Board
from munch.components.score import Score
from munch.components.tile import SpecialKind, Tile
from munch.components.tile_source import TileSource
from munch.constants import MAX_CASCADE_STEPS, POINTS_PER_TILE
from munch.events.bus import (
    EventBus,
    EVENT_ANIMATION_START,
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_STABLE,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_COMBO_TRIGGERED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SPECIAL_CREATED,
    EVENT_SPECIAL_TRIGGERED,
    EVENT_TILE_SWAP_FINALIZE,
)
from munch.systems.board_ops import GravityMove, get_tile_source, settle
from munch.systems.cascade_state_utils import get_or_create_cascade_state, resolving
from munch.systems.combo import resolve_combo
from munch.systems.match import MatchGroup, find_match_groups
from munch.systems.specials import Detonation, Trigger, detonate
from munch.utils.grid import Position

logger = logging.getLogger(__name__)

# Called once per step between detection and clearing; collaborators use it to
# play the clear animation. Receives the step kind ('fade' or 'combo') and the
# positions about to be cleared.
Pause = Callable[[str, List[Position]], None]


@dataclass(frozen=True, slots=True)
class ResolutionStep:
    """Outcome of one clear -> gravity -> refill step."""
    board: Board
    cleared: Tuple[Position, ...]
    cleared_tiles: Tuple[Tuple[Position, Tile], ...]
    spawned: Tuple[Tuple[Position, SpecialKind], ...]
    triggered: Tuple[Trigger, ...]
    moves: Tuple[GravityMove, ...]
    new_tiles: Tuple[Position, ...]
    score_delta: int


def spawn_priority(groups: Sequence[MatchGroup]) -> List[MatchGroup]:
    """Groups in the order their spawns are applied.

    Later spawns overwrite earlier ones on a shared cell, so the group applied
    last, the largest and then earliest discovered, wins.
    """
    return sorted(groups, key=lambda g: (g.size, -g.order))


def _finish(
    before: Board,
    detonation: Detonation,
    spawns: Dict[Position, Tile],
    source: TileSource,
    per_tile: int,
) -> ResolutionStep:
    holed = detonation.board.with_tiles(spawns)
    board, moves, new_tiles = settle(holed, source)
    cleared = tuple(sorted(detonation.cleared))
    return ResolutionStep(
        board=board,
        cleared=cleared,
        cleared_tiles=tuple((pos, before.tile_at(pos)) for pos in cleared),
        spawned=tuple((pos, tile.special) for pos, tile in sorted(spawns.items())),
        triggered=detonation.triggered,
        moves=tuple(moves),
        new_tiles=tuple(new_tiles),
        score_delta=len(cleared) * per_tile,
    )


def resolve_groups(
    board: Board,
    groups: Iterable[MatchGroup],
    source: TileSource,
    per_tile: int = POINTS_PER_TILE,
) -> ResolutionStep:
    """Clear matched cells, leave spawned specials behind, drop and refill.

    Specials inside the cleared cells go off and may reach further specials.
    A spawn cell is never cleared in the same step, whichever effect reaches
    it; if it already held a special, the new one replaces it.
    """
    groups = list(groups)
    clear: set[Position] = set()
    for group in groups:
        clear |= group.cells
    spawns: Dict[Position, Tile] = {}
    for group in spawn_priority(groups):
        if group.spawn_at is None or group.spawn_kind is SpecialKind.NONE:
            continue
        tile = board.tile_at(group.spawn_at)
        if tile is None:
            continue
        spawns[group.spawn_at] = Tile(tile.color, group.spawn_kind)
    blast = detonate(board, clear - set(spawns), spare=set(spawns))
    return _finish(board, blast, spawns, source, per_tile)


def resolve_detonation(
    board: Board,
    detonation: Detonation,
    source: TileSource,
    per_tile: int = POINTS_PER_TILE,
) -> ResolutionStep:
    """Drop and refill after a combo or any other region clear."""
    return _finish(board, detonation, {}, source, per_tile)


class MatchResolutionSystem:
    """Runs combos and the detect -> resolve cascade until the board is stable."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        board_system,
        *,
        pause: Optional[Pause] = None,
        max_steps: int = MAX_CASCADE_STEPS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.pause = pause
        self.max_steps = max_steps
        self.event_bus.subscribe(EVENT_TILE_SWAP_FINALIZE, self.on_swap_finalize)
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)

    def on_swap_finalize(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        combo = bool(kwargs.get('combo'))
        state = get_or_create_cascade_state(self.world)
        if state.resolving:
            self._resolve_swap(src, dst, combo)
            return
        with resolving(self.world, self.event_bus):
            self._resolve_swap(src, dst, combo)

    def on_board_changed(self, sender, **kwargs):
        # Board edited from outside a swap; settle it the same way when idle.
        state = get_or_create_cascade_state(self.world)
        if state.resolving:
            return
        reason = kwargs.get('reason', 'board_changed')
        with resolving(self.world, self.event_bus):
            self.run_cascade(reason=reason)

    def _resolve_swap(self, src: Position, dst: Position, combo: bool) -> None:
        if combo:
            self._resolve_combo(src, dst)
        self.run_cascade(reason='swap')

    def _resolve_combo(self, src: Position, dst: Position) -> None:
        board = self.board_system.board
        kinds = (board.tile_at(src).special, board.tile_at(dst).special)
        self.event_bus.emit(EVENT_COMBO_TRIGGERED, src=src, dst=dst, kinds=kinds)
        blast = resolve_combo(board, src, dst, self.world.random)
        positions = sorted(blast.cleared)
        self.event_bus.emit(EVENT_ANIMATION_START, kind='combo', items=positions)
        self._wait('combo', positions)
        step = resolve_detonation(board, blast, get_tile_source(self.world), self._per_tile())
        self._commit(step, reason='combo')

    def run_cascade(self, reason: str = 'swap') -> Board:
        """Detect and resolve until no group remains, then publish the board."""
        state = get_or_create_cascade_state(self.world)
        source = get_tile_source(self.world)
        state.depth = 0
        while True:
            board = self.board_system.board
            groups = find_match_groups(board)
            if not groups:
                break
            if state.steps >= self.max_steps:
                raise RuntimeError(f"Cascade did not settle within {self.max_steps} steps")
            state.depth += 1
            state.steps += 1
            positions = sorted({pos for group in groups for pos in group.cells})
            logger.debug("Cascade depth %d: %d groups over %d cells", state.depth, len(groups), len(positions))
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.depth, positions=positions, reason=reason)
            self.event_bus.emit(EVENT_MATCH_FOUND, groups=groups, positions=positions, size=len(positions), reason=reason)
            self.event_bus.emit(EVENT_ANIMATION_START, kind='fade', items=positions)
            self._wait('fade', positions)
            step = resolve_groups(board, groups, source, self._per_tile())
            self._commit(step, reason=reason)
        board = self.board_system.board
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.depth)
        self.event_bus.emit(EVENT_BOARD_STABLE, board=board, score=self._score_value())
        return board

    def _wait(self, kind: str, positions: List[Position]) -> None:
        if self.pause is not None:
            self.pause(kind, positions)

    def _commit(self, step: ResolutionStep, reason: str) -> None:
        self.board_system.commit(step.board)
        for pos, kind in step.triggered:
            self.event_bus.emit(EVENT_SPECIAL_TRIGGERED, position=pos, kind=kind)
        colors = [(pos[0], pos[1], tile.color) for pos, tile in step.cleared_tiles]
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=list(step.cleared), colors=colors, reason=reason)
        for pos, kind in step.spawned:
            self.event_bus.emit(EVENT_SPECIAL_CREATED, position=pos, kind=kind)
        cascades = len({move.source[1] for move in step.moves})
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=list(step.moves), cascades=cascades)
        if step.new_tiles:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=list(step.new_tiles))

    def _per_tile(self) -> int:
        for _, score in self.world.get_component(Score):
            return score.per_tile
        return POINTS_PER_TILE

    def _score_value(self) -> int:
        for _, score in self.world.get_component(Score):
            return score.value
        return 0
