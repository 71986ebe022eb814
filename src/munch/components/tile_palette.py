from dataclasses import dataclass, field
from typing import Dict, Iterable, List


@dataclass(slots=True)
class TilePalette:
    """Canonical monster colors and the image asset each is drawn with.

    Lives on the entity tagged with TilePaletteRegistry. The engine only needs
    the color names; assets are handed to collaborators describing the board.
    """
    assets: Dict[str, str]
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.assets:
            raise ValueError("TilePalette needs at least one color")
        if self.spawnable:
            # Preserve order while filtering unknown colors.
            self.spawnable = self._filter(self.spawnable) or list(self.assets.keys())
        else:
            self.spawnable = list(self.assets.keys())

    def _filter(self, colors: Iterable[str]) -> List[str]:
        seen: set[str] = set()
        filtered: List[str] = []
        for name in colors:
            if name in self.assets and name not in seen:
                filtered.append(name)
                seen.add(name)
        return filtered

    def asset_for(self, color: str) -> str:
        return self.assets[color]

    def spawnable_colors(self) -> List[str]:
        return list(self.spawnable)

    def set_spawnable(self, colors: Iterable[str]) -> None:
        self.spawnable = self._filter(colors) or list(self.assets.keys())
