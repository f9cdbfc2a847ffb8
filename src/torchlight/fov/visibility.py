from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Optional, Set, Tuple

from ..map.grid import Grid
from .base import Coord, FovAlgorithm, TransparencyMap
from .shadowcast import ShadowcastFov

logger = logging.getLogger(__name__)

_SweepKey = Tuple[int, int, int, bool]


class VisibilityEngine:
    """
    Drives an FOV algorithm over a Grid.

    Responsibilities:
    - Keeps a transparency snapshot of the grid (``refresh`` after walls change).
    - Runs the sweep at most once per distinct (origin, radius, light_walls)
      request within a frame; ``begin_frame`` drops those results.
    - Marks tiles explored when they are seen by the observer.

    ``occlusion`` is the side-effect free primitive the lighting engine uses
    to find which tiles an emitter reaches. ``LightingEngine.accumulate`` and
    ``DungeonSession.update`` open a new frame; callers driving
    ``compute_visible`` directly own the frame boundary.
    """

    def __init__(self, grid: Grid, algorithm: Optional[FovAlgorithm] = None) -> None:
        self.grid = grid
        self.algorithm: FovAlgorithm = algorithm or ShadowcastFov()
        self._transparency = TransparencyMap.from_grid(grid)
        self._sweeps: Dict[_SweepKey, FrozenSet[Coord]] = {}
        self._visible: FrozenSet[Coord] = frozenset()
        logger.debug(
            "VisibilityEngine initialized: %dx%d using %s",
            grid.width,
            grid.height,
            type(self.algorithm).__name__,
        )

    @property
    def transparency(self) -> TransparencyMap:
        return self._transparency

    @property
    def visible(self) -> FrozenSet[Coord]:
        """Tiles seen by the most recent ``compute_visible`` call."""
        return self._visible

    def refresh(self) -> None:
        """Rebuild the transparency snapshot from the current grid."""
        self._transparency = TransparencyMap.from_grid(self.grid)
        self._sweeps.clear()
        logger.debug("VisibilityEngine refreshed transparency for %r", self.grid)

    def rebind(self, grid: Grid) -> None:
        """Switch to a new grid (e.g. after regeneration); previous visibility is dropped."""
        self.grid = grid
        self._visible = frozenset()
        self.refresh()

    def begin_frame(self) -> None:
        self._sweeps.clear()

    def occlusion(self, x: int, y: int, radius: int, light_walls: bool = True) -> FrozenSet[Coord]:
        """Tiles reachable from (x, y) within radius, without touching explored state."""
        if not self.grid.in_bounds(x, y):
            raise IndexError(f"Origin ({x},{y}) out of bounds for {self.grid!r}")
        if radius < 0:
            raise ValueError("radius must be >= 0")
        key = (x, y, radius, light_walls)
        cached = self._sweeps.get(key)
        if cached is not None:
            return cached
        result = frozenset(self.algorithm.compute(self._transparency, x, y, radius, light_walls))
        self._sweeps[key] = result
        return result

    def compute_visible(self, x: int, y: int, radius: int, light_walls: bool = True) -> Set[Coord]:
        """Visible tiles for an observer at (x, y); every returned tile becomes explored."""
        visible = self.occlusion(x, y, radius, light_walls)
        for vx, vy in visible:
            self.grid.get(vx, vy).explored = True
        self._visible = visible
        logger.debug("Observer at (%d,%d) radius %d sees %d tiles", x, y, radius, len(visible))
        return set(visible)

    def is_visible(self, x: int, y: int) -> bool:
        return (x, y) in self._visible


__all__ = ["VisibilityEngine"]
