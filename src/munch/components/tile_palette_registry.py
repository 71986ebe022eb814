from dataclasses import dataclass

@dataclass(slots=True)
class TilePaletteRegistry:
    """Empty tag component marking the single entity that stores the tile palette.

    The same entity also carries a TilePalette component mapping color -> asset.
    """
    pass
