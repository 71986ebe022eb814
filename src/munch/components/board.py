from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from munch.components.tile import Tile
from munch.utils.grid import Position, in_bounds, index

Cell = Optional[Tile]


@dataclass(frozen=True, slots=True)
class Board:
    """Square grid of cells stored row-major.

    Row 0 is the top row; gravity pulls tiles toward higher row numbers.
    A Board is never edited in place: every transformation returns a new one,
    and the session swaps the component on its board entity when it commits.
    """
    size: int
    cells: Tuple[Cell, ...]

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Board size must be positive, got {self.size}")
        if len(self.cells) != self.size * self.size:
            raise ValueError(
                f"Board of size {self.size} needs {self.size * self.size} cells, got {len(self.cells)}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> Board:
        size = len(rows)
        cells: List[Cell] = []
        for row in rows:
            if len(row) != size:
                raise ValueError("Board rows must form a square")
            cells.extend(row)
        return cls(size=size, cells=tuple(cells))

    @classmethod
    def empty(cls, size: int) -> Board:
        return cls(size=size, cells=(None,) * (size * size))

    def tile_at(self, pos: Position) -> Cell:
        row, col = pos
        if not in_bounds(row, col, self.size):
            return None
        return self.cells[index(row, col, self.size)]

    def color_at(self, pos: Position) -> Optional[str]:
        tile = self.tile_at(pos)
        return tile.color if tile is not None else None

    def positions(self) -> Iterator[Position]:
        for row in range(self.size):
            for col in range(self.size):
                yield (row, col)

    def items(self) -> Iterator[Tuple[Position, Cell]]:
        for pos in self.positions():
            yield pos, self.cells[index(pos[0], pos[1], self.size)]

    def rows(self) -> List[Tuple[Cell, ...]]:
        return [self.cells[r * self.size:(r + 1) * self.size] for r in range(self.size)]

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    def empty_positions(self) -> List[Position]:
        return [pos for pos, cell in self.items() if cell is None]

    def positions_of_color(self, color: str) -> List[Position]:
        return [pos for pos, cell in self.items() if cell is not None and cell.color == color]

    def with_tiles(self, updates: Mapping[Position, Cell]) -> Board:
        if not updates:
            return self
        cells = list(self.cells)
        for (row, col), tile in updates.items():
            if not in_bounds(row, col, self.size):
                raise ValueError(f"Position {(row, col)} is outside a board of size {self.size}")
            cells[index(row, col, self.size)] = tile
        return Board(size=self.size, cells=tuple(cells))

    def cleared(self, positions: Iterable[Position]) -> Board:
        return self.with_tiles({pos: None for pos in positions})

    def swapped(self, a: Position, b: Position) -> Board:
        return self.with_tiles({a: self.tile_at(b), b: self.tile_at(a)})

    def color_map(self) -> Dict[Position, str]:
        return {pos: cell.color for pos, cell in self.items() if cell is not None}
