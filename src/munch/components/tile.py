from dataclasses import dataclass, replace
from enum import Enum


class SpecialKind(Enum):
    """Area-of-effect carried by a tile."""
    NONE = "none"
    STRIPED_ROW = "striped_row"
    STRIPED_COLUMN = "striped_column"
    WRAPPED = "wrapped"
    COLORBOMB = "colorbomb"

    @property
    def is_striped(self) -> bool:
        return self in (SpecialKind.STRIPED_ROW, SpecialKind.STRIPED_COLUMN)


@dataclass(frozen=True, slots=True)
class Tile:
    """A monster occupying one board cell.

    Tiles are values: conversions build a new Tile instead of editing one that
    may be referenced from another board snapshot. ``color`` survives every
    conversion; only ``special`` changes.
    """
    color: str
    special: SpecialKind = SpecialKind.NONE

    @property
    def is_special(self) -> bool:
        return self.special is not SpecialKind.NONE

    def with_special(self, kind: SpecialKind) -> "Tile":
        return replace(self, special=kind)
