from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from esper import World

from munch.components.board import Board
from munch.components.tile import Tile
from munch.components.tile_palette import TilePalette
from munch.components.tile_palette_registry import TilePaletteRegistry
from munch.components.tile_source import TileSource
from munch.constants import MAX_GENERATION_ATTEMPTS, MIN_RUN
from munch.utils.grid import Position, in_bounds


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    tile: Tile


def get_palette(world: World) -> TilePalette:
    for entity, _ in world.get_component(TilePaletteRegistry):
        return world.component_for_entity(entity, TilePalette)
    raise RuntimeError("TilePalette definitions not found")


def get_tile_source(world: World) -> TileSource:
    for _, source in world.get_component(TileSource):
        return source
    raise RuntimeError("TileSource not found")


def set_spawnable_colors(world: World, colors: Sequence[str]) -> List[str]:
    """Restrict which colors new boards and refills draw from.

    Unknown names are dropped; an empty result falls back to every palette
    color. Replayed refill sequences are left alone.
    """
    palette = get_palette(world)
    palette.set_spawnable(colors)
    spawnable = palette.spawnable_colors()
    get_tile_source(world).colors = list(spawnable)
    return spawnable


def compute_gravity_moves(board: Board) -> List[GravityMove]:
    """Moves that compact every column toward the bottom row, keeping tile order."""
    moves: List[GravityMove] = []
    size = board.size
    for col in range(size):
        target_row = size - 1
        for row in range(size - 1, -1, -1):
            tile = board.tile_at((row, col))
            if tile is None:
                continue
            if row != target_row:
                moves.append(GravityMove(source=(row, col), target=(target_row, col), tile=tile))
            target_row -= 1
    return moves


def apply_gravity(board: Board) -> Tuple[Board, List[GravityMove]]:
    moves = compute_gravity_moves(board)
    if not moves:
        return board, []
    updates: Dict[Position, Tile | None] = {move.source: None for move in moves}
    # Targets are written after sources so a tile landing on a vacated source survives.
    for move in moves:
        updates[move.target] = move.tile
    return board.with_tiles(updates), moves


def refill_empty_cells(board: Board, source: TileSource) -> Tuple[Board, List[Position]]:
    """Fill every empty cell, column by column from the left, top to bottom."""
    updates: Dict[Position, Tile] = {}
    for col in range(board.size):
        for row in range(board.size):
            if board.tile_at((row, col)) is None:
                updates[(row, col)] = source.draw()
    if not updates:
        return board, []
    return board.with_tiles(updates), list(updates.keys())


def settle(board: Board, source: TileSource) -> Tuple[Board, List[GravityMove], List[Position]]:
    """Gravity followed by refill; the result is always fully populated."""
    dropped, moves = apply_gravity(board)
    filled, new_tiles = refill_empty_cells(dropped, source)
    return filled, moves, new_tiles


def generate_board(
    size: int,
    colors: Sequence[str],
    *,
    rng: random.Random,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
) -> Board:
    """Fill a whole board with plain tiles that contain no runs."""

    choices = list(colors)
    if not choices:
        raise ValueError("Cannot generate a board without colors")

    for _ in range(max_attempts):
        layout: List[List[str]] = []
        valid_layout = True
        for row in range(size):
            row_values: List[str] = []
            for col in range(size):
                available = list(choices)
                if col >= 2:
                    left1 = row_values[col - 1]
                    left2 = row_values[col - 2]
                    if left1 == left2 and left1 in available:
                        available = [c for c in available if c != left1]
                if row >= 2:
                    up1 = layout[row - 1][col]
                    up2 = layout[row - 2][col]
                    if up1 == up2 and up1 in available:
                        available = [c for c in available if c != up1]
                if not available:
                    valid_layout = False
                    break
                row_values.append(rng.choice(available))
            if not valid_layout:
                break
            layout.append(row_values)
        if not valid_layout or len(layout) != size:
            continue
        return Board.from_rows([[Tile(color) for color in row] for row in layout])

    raise RuntimeError("Unable to generate a board without matches")


def _has_line_match(types: Dict[Position, str], pos: Position) -> bool:
    """Return True if a horizontal or vertical run passes through pos."""
    row, col = pos
    tval = types.get(pos)
    if tval is None:
        return False
    # Horizontal sweep
    h_run = 1
    c_left = col - 1
    while types.get((row, c_left)) == tval:
        h_run += 1
        c_left -= 1
    c_right = col + 1
    while types.get((row, c_right)) == tval:
        h_run += 1
        c_right += 1
    if h_run >= MIN_RUN:
        return True
    # Vertical sweep
    v_run = 1
    r_up = row - 1
    while types.get((r_up, col)) == tval:
        v_run += 1
        r_up -= 1
    r_down = row + 1
    while types.get((r_down, col)) == tval:
        v_run += 1
        r_down += 1
    return v_run >= MIN_RUN


def predict_swap_creates_match(board: Board, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would create a run through either endpoint."""
    if board.tile_at(src) is None or board.tile_at(dst) is None:
        return False
    swapped = board.swapped(src, dst).color_map()
    return _has_line_match(swapped, src) or _has_line_match(swapped, dst)


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for row in range(board.size):
        for col in range(board.size):
            pos = (row, col)
            for other in ((row, col + 1), (row + 1, col)):
                if not in_bounds(other[0], other[1], board.size):
                    continue
                if predict_swap_creates_match(board, pos, other):
                    swaps.append((pos, other))
    return swaps


def describe_board(board: Board, palette: TilePalette) -> List[List[Dict[str, str] | None]]:
    """Plain description of the board for collaborators that draw it."""
    rows: List[List[Dict[str, str] | None]] = []
    for row in board.rows():
        described: List[Dict[str, str] | None] = []
        for tile in row:
            if tile is None:
                described.append(None)
                continue
            described.append({
                'color': tile.color,
                'special': tile.special.value,
                'asset': palette.asset_for(tile.color),
            })
        rows.append(described)
    return rows
