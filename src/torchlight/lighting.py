from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from .fov.visibility import VisibilityEngine
from .map.grid import Grid
from .rng import RandomLike, RandomSource

logger = logging.getLogger(__name__)

DEFAULT_JITTER_STDDEV = 0.05


@dataclass
class LightSource:
    """A light emitter on the map. A radius of 0 means it does not emit."""

    x: int
    y: int
    radius: int

    @property
    def emits(self) -> bool:
        return self.radius > 0


def light_contribution(distance: float, radius: int, jitter: float = 0.0) -> float:
    """Linear falloff from 1 at the emitter to 0 at ``radius``, shifted by jitter."""
    if radius <= 0:
        return 0.0
    return 1.0 - distance / radius + jitter


class LightingEngine:
    """Additive multi-source lighting.

    Every frame the grid's light is cleared and each emitting source adds
    ``1 - distance / radius + jitter`` to the tiles it reaches. Reach is the
    visibility engine's occlusion sweep from the emitter, so light stops at
    walls. Contributions sum without a cap; clamp when displaying.
    """

    def __init__(
        self,
        rng: Optional[RandomLike] = None,
        jitter_stddev: float = DEFAULT_JITTER_STDDEV,
        light_walls: bool = True,
    ) -> None:
        if jitter_stddev < 0:
            raise ValueError("jitter_stddev must be >= 0")
        self.rng = rng if rng is not None else RandomSource()
        self.jitter_stddev = jitter_stddev
        self.light_walls = light_walls

    def sample_jitter(self) -> float:
        if self.jitter_stddev == 0:
            return 0.0
        return self.rng.gauss(0.0, self.jitter_stddev)

    def accumulate(self, grid: Grid, emitters: Iterable[LightSource], visibility: VisibilityEngine) -> None:
        """Re-light the grid from scratch; one lighting pass is one sweep frame."""
        visibility.begin_frame()
        grid.clear_light()
        lit_sources = 0
        for source in emitters:
            if not source.emits:
                continue
            jitter = self.sample_jitter()
            reach = visibility.occlusion(source.x, source.y, source.radius, self.light_walls)
            self._apply(grid, source, reach, jitter)
            lit_sources += 1
        logger.debug("Accumulated lighting from %d emitters", lit_sources)

    @staticmethod
    def _apply(grid: Grid, source: LightSource, reach, jitter: float) -> None:
        r = source.radius
        min_x, max_x = source.x - r, source.x + r
        min_y, max_y = source.y - r, source.y + r
        for x, y in reach:
            if x < min_x or x > max_x or y < min_y or y > max_y:
                continue
            distance = math.sqrt((x - source.x) ** 2 + (y - source.y) ** 2)
            grid.get(x, y).light_intensity += light_contribution(distance, r, jitter)


__all__ = ["DEFAULT_JITTER_STDDEV", "LightSource", "LightingEngine", "light_contribution"]
