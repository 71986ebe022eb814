from dataclasses import dataclass

from munch.constants import POINTS_PER_TILE


@dataclass(slots=True)
class Score:
    """Running session score; only a new game brings it back to zero."""
    value: int = 0
    per_tile: int = POINTS_PER_TILE
