"""One game of Monster Munch.

A Session wires the world, the event bus and the systems together, the same
way the game window does, and is the object collaborators talk to: they
subscribe to ``session.event_bus`` and call :meth:`Session.request_swap`.
"""
from __future__ import annotations

import random
from typing import Dict, List, Optional

from munch.components.board import Board
from munch.components.tile_source import TileSource
from munch.constants import BOARD_SIZE, POINTS_PER_TILE
from munch.events.bus import EventBus, EVENT_NEW_GAME
from munch.systems.board import BoardSystem
from munch.systems.board_ops import find_valid_swaps
from munch.systems.cascade_state_utils import is_busy
from munch.systems.match import MatchSystem, SwapOutcome
from munch.systems.match_resolution import MatchResolutionSystem, Pause
from munch.systems.score_system import ScoreSystem
from munch.utils.grid import Position
from munch.world import create_world


class Session:
    def __init__(
        self,
        *,
        size: int = BOARD_SIZE,
        seed: int | None = None,
        rng: random.Random | None = None,
        palette: Optional[Dict[str, str]] = None,
        points_per_tile: int = POINTS_PER_TILE,
        tile_source: TileSource | None = None,
        pause: Pause | None = None,
        event_bus: EventBus | None = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(
            self.event_bus,
            rng=rng or random.Random(seed),
            palette=palette,
            points_per_tile=points_per_tile,
            tile_source=tile_source,
        )
        self.score_system = ScoreSystem(self.world, self.event_bus)
        self.board_system = BoardSystem(self.world, self.event_bus, size)
        self.match_system = MatchSystem(self.world, self.event_bus, self.board_system)
        self.match_resolution_system = MatchResolutionSystem(
            self.world, self.event_bus, self.board_system, pause=pause
        )

    @property
    def board(self) -> Board:
        return self.board_system.board

    @property
    def score(self) -> int:
        return self.score_system.value

    @property
    def busy(self) -> bool:
        return is_busy(self.world)

    def request_swap(self, a: Position, b: Position) -> SwapOutcome:
        return self.match_system.request_swap(tuple(a), tuple(b))

    def load_board(self, board: Board) -> None:
        """Replace the board as-is, without resolving it."""
        self.board_system.commit(board)

    def new_game(self) -> Board:
        if self.busy:
            raise RuntimeError("Cannot start a new game while the board is resolving")
        board = self.board_system.reset()
        self.event_bus.emit(EVENT_NEW_GAME, board=board)
        return board

    def hints(self) -> List[tuple[Position, Position]]:
        return find_valid_swaps(self.board)

    def describe(self) -> List[List[dict]]:
        return self.board_system.describe()
