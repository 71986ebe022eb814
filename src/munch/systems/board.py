from typing import List

from esper import World

from munch.components.board import Board
from munch.events.bus import EventBus, EVENT_TILE_SWAP_DO, EVENT_TILE_SWAP_FINALIZE
from munch.constants import BOARD_SIZE
from munch.systems.board_ops import describe_board, generate_board, get_palette
from munch.utils.grid import Position


class BoardSystem:
    """Owns the board entity and commits new board values to it.

    Readers get the committed Board value, which is immutable, so a snapshot
    handed to a collaborator never changes underneath it.
    """
    def __init__(self, world: World, event_bus: EventBus, size: int = BOARD_SIZE):
        self.world = world
        self.event_bus = event_bus
        self.size = size
        # Create a single board entity holding the Board component
        self.board_entity = self.world.create_entity(self._fresh_board())
        self.event_bus.subscribe(EVENT_TILE_SWAP_DO, self.on_swap_do)

    def _fresh_board(self) -> Board:
        palette = get_palette(self.world)
        return generate_board(self.size, palette.spawnable_colors(), rng=self.world.random)

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def commit(self, board: Board) -> None:
        if board.size != self.size:
            raise ValueError(f"Expected a board of size {self.size}, got {board.size}")
        if not board.is_full():
            raise ValueError(f"Refusing to commit a board with empty cells: {board.empty_positions()}")
        # add_component replaces the previous Board on the entity.
        self.world.add_component(self.board_entity, board)

    def reset(self) -> Board:
        board = self._fresh_board()
        self.commit(board)
        return board

    def swap_tiles(self, a: Position, b: Position) -> None:
        self.commit(self.board.swapped(a, b))

    def on_swap_do(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.swap_tiles(src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst, combo=kwargs.get('combo', False))

    def describe(self) -> List[List[dict]]:
        return describe_board(self.board, get_palette(self.world))
