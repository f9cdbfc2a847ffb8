from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Optional, Tuple

from ..map.grid import Coord, Grid

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class TileView:
    """Per-tile state handed to a renderer for one frame."""

    x: int
    y: int
    visible: bool
    is_wall: bool
    explored: bool
    intensity: float  # clamped to [0, 1]


def lerp_color(a: RGB, b: RGB, t: float) -> RGB:
    t = max(0.0, min(1.0, t))
    return (
        int(round(a[0] + (b[0] - a[0]) * t)),
        int(round(a[1] + (b[1] - a[1]) * t)),
        int(round(a[2] + (b[2] - a[2]) * t)),
    )


@dataclass(frozen=True)
class Palette:
    """Colours keyed on (visible, is_wall).

    Tiles outside the field of view use the dark colour of their category.
    Visible tiles are blended from dark to lit by their light intensity.
    Unexplored tiles are not drawn.
    """

    dark_wall: RGB = (0, 0, 100)
    lit_wall: RGB = (130, 110, 50)
    dark_ground: RGB = (50, 50, 150)
    lit_ground: RGB = (200, 180, 50)

    def table(self) -> Dict[Tuple[bool, bool], RGB]:
        return {
            (False, True): self.dark_wall,
            (False, False): self.dark_ground,
            (True, True): self.lit_wall,
            (True, False): self.lit_ground,
        }

    def color_for(self, view: TileView) -> Optional[RGB]:
        if not view.explored:
            return None
        table = self.table()
        dark = table[(False, view.is_wall)]
        if not view.visible:
            return dark
        return lerp_color(dark, table[(True, view.is_wall)], view.intensity)


def shade_tiles(grid: Grid, visible: AbstractSet[Coord]) -> List[TileView]:
    """Combine visibility, walls, explored memory and light into one view per tile."""
    views: List[TileView] = []
    for x, y, tile in grid.tiles():
        views.append(
            TileView(
                x=x,
                y=y,
                visible=(x, y) in visible,
                is_wall=tile.is_wall,
                explored=tile.explored,
                intensity=tile.brightness,
            )
        )
    return views


__all__ = ["RGB", "TileView", "Palette", "lerp_color", "shade_tiles"]
