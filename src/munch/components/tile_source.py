from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from munch.components.tile import Tile


@dataclass(slots=True)
class TileSource:
    """Supplies fresh plain tiles for every refill.

    Draws uniformly from ``colors`` with the injected generator. When
    ``sequence`` is set the colors are replayed from it in order instead,
    which keeps refills deterministic.
    """
    rng: Optional[random.Random]
    colors: List[str]
    sequence: Optional[List[str]] = None
    drawn: int = field(default=0)

    def __post_init__(self) -> None:
        if not self.colors and not self.sequence:
            raise ValueError("TileSource needs at least one color")
        if self.sequence is None and self.rng is None:
            raise ValueError("TileSource needs a generator unless it replays a sequence")

    @classmethod
    def replaying(cls, sequence: Sequence[str], rng: random.Random | None = None) -> TileSource:
        colors = list(dict.fromkeys(sequence))
        return cls(rng=rng, colors=colors, sequence=list(sequence))

    def draw(self) -> Tile:
        if self.sequence:
            color = self.sequence[self.drawn % len(self.sequence)]
        else:
            color = self.rng.choice(self.colors)
        self.drawn += 1
        return Tile(color)
