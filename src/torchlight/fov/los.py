from __future__ import annotations

from typing import List, Set
import logging

from .base import Coord, TransparencyMap, drop_opaque

logger = logging.getLogger(__name__)


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Coord]:
    """
    Bresenham's line algorithm. Returns the list of points from (x0, y0) to (x1, y1) inclusive.
    """
    points: List[Coord] = []

    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return points


def has_line_of_sight(transparency: TransparencyMap, x0: int, y0: int, x1: int, y1: int) -> bool:
    """
    True when every tile strictly between (x0, y0) and (x1, y1) is transparent.
    The target itself may be opaque so that walls facing the viewer are seen.
    """
    line = bresenham_line(x0, y0, x1, y1)
    for x, y in line[1:-1]:
        if not transparency.is_transparent(x, y):
            return False
    return True


class LineOfSightFov:
    """Ray per target tile: simpler than shadow casting and slower on big radii."""

    def compute(
        self,
        transparency: TransparencyMap,
        origin_x: int,
        origin_y: int,
        radius: int,
        light_walls: bool,
    ) -> Set[Coord]:
        if not transparency.in_bounds(origin_x, origin_y):
            raise IndexError(f"FOV origin ({origin_x},{origin_y}) out of bounds")
        if radius < 0:
            raise ValueError("radius must be >= 0")

        r = transparency.effective_radius(radius)
        r2 = r * r
        visible: Set[Coord] = {(origin_x, origin_y)}

        min_x = max(0, origin_x - r)
        max_x = min(transparency.width - 1, origin_x + r)
        min_y = max(0, origin_y - r)
        max_y = min(transparency.height - 1, origin_y + r)

        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                dx, dy = x - origin_x, y - origin_y
                if dx * dx + dy * dy > r2:
                    continue
                if has_line_of_sight(transparency, origin_x, origin_y, x, y):
                    visible.add((x, y))

        if not light_walls:
            visible = drop_opaque(transparency, visible, (origin_x, origin_y))
        logger.debug("LoS FOV from (%d,%d) radius %d -> %d visible tiles", origin_x, origin_y, radius, len(visible))
        return visible


__all__ = ["LineOfSightFov", "bresenham_line", "has_line_of_sight"]
