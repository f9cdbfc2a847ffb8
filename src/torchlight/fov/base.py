from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Protocol, Set, Tuple

from ..map.grid import Grid

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


@dataclass(frozen=True)
class TransparencyMap:
    """Per-tile transparency and walkability snapshot of a Grid.

    FOV algorithms read this instead of the Grid so that a sweep never
    observes a half-mutated map. Rebuild it with ``from_grid`` whenever
    the walls change.
    """

    width: int
    height: int
    transparent: Tuple[bool, ...]
    walkable: Tuple[bool, ...]

    @classmethod
    def from_grid(cls, grid: Grid) -> "TransparencyMap":
        transparent: List[bool] = []
        walkable: List[bool] = []
        for _, _, tile in grid.tiles():
            transparent.append(not tile.block_sight)
            walkable.append(not tile.blocked)
        return cls(grid.width, grid.height, tuple(transparent), tuple(walkable))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_transparent(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.transparent[y * self.width + x]

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.walkable[y * self.width + x]

    def effective_radius(self, radius: int) -> int:
        """Radius 0 means unlimited: large enough to reach every tile."""
        if radius > 0:
            return radius
        return int(math.ceil(math.hypot(self.width, self.height)))


class FovAlgorithm(Protocol):
    """Occlusion sweep used by the visibility and lighting engines.

    Implementations return every in-bounds tile visible from the origin
    within ``radius`` (Euclidean, inclusive; 0 for unlimited). The origin is
    always included. When ``light_walls`` is False, opaque tiles are left
    out of the result; occlusion itself is unchanged.
    """

    def compute(
        self,
        transparency: TransparencyMap,
        origin_x: int,
        origin_y: int,
        radius: int,
        light_walls: bool,
    ) -> Set[Coord]: ...


def drop_opaque(transparency: TransparencyMap, visible: Set[Coord], origin: Coord) -> Set[Coord]:
    return {c for c in visible if c == origin or transparency.is_transparent(*c)}


__all__ = ["Coord", "FovAlgorithm", "TransparencyMap", "drop_opaque"]
