"""Coordinate helpers shared by every board-level routine.

Positions are ``(row, col)`` tuples. All helpers are pure and never raise for
off-board coordinates; callers filter with :func:`in_bounds`.
"""
from typing import Iterator, List, Tuple

from munch.constants import BOARD_SIZE

Position = Tuple[int, int]

ORTHOGONAL: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def index(row: int, col: int, size: int = BOARD_SIZE) -> int:
    """Row-major flat index of ``(row, col)``."""
    return row * size + col


def position_of(flat_index: int, size: int = BOARD_SIZE) -> Position:
    return divmod(flat_index, size)


def in_bounds(row: int, col: int, size: int = BOARD_SIZE) -> bool:
    return 0 <= row < size and 0 <= col < size


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def neighbors(pos: Position, size: int = BOARD_SIZE) -> List[Position]:
    row, col = pos
    return [
        (row + dr, col + dc)
        for dr, dc in ORTHOGONAL
        if in_bounds(row + dr, col + dc, size)
    ]


def block(center: Position, radius: int, size: int = BOARD_SIZE) -> Iterator[Position]:
    """Cells of the square of side ``2 * radius + 1`` centred on ``center``, clipped to the board."""
    row, col = center
    for r in range(row - radius, row + radius + 1):
        for c in range(col - radius, col + radius + 1):
            if in_bounds(r, c, size):
                yield (r, c)


def row_cells(row: int, size: int = BOARD_SIZE) -> List[Position]:
    if not 0 <= row < size:
        return []
    return [(row, c) for c in range(size)]


def column_cells(col: int, size: int = BOARD_SIZE) -> List[Position]:
    if not 0 <= col < size:
        return []
    return [(r, col) for r in range(size)]
