from __future__ import annotations

import logging
from typing import Set

from .base import Coord, TransparencyMap, drop_opaque

logger = logging.getLogger(__name__)

# Octant transforms: (xx, xy, yx, yy) columns for each of the eight octants.
_MULT = (
    (1, 0, 0, -1, -1, 0, 0, 1),
    (0, 1, -1, 0, 0, -1, 1, 0),
    (0, 1, 1, 0, 0, -1, -1, 0),
    (1, 0, 0, 1, -1, 0, 0, -1),
)


class ShadowcastFov:
    """Recursive shadow casting over eight octants.

    Each octant is scanned row by row outward from the origin, tracking the
    slope interval that is still unobstructed. An opaque tile narrows the
    interval and spawns a recursive scan of the remaining gap.
    """

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
        visible: Set[Coord] = {(origin_x, origin_y)}
        for octant in range(8):
            self._cast_light(
                transparency,
                visible,
                origin_x,
                origin_y,
                1,
                1.0,
                0.0,
                r,
                _MULT[0][octant],
                _MULT[1][octant],
                _MULT[2][octant],
                _MULT[3][octant],
            )

        if not light_walls:
            visible = drop_opaque(transparency, visible, (origin_x, origin_y))
        logger.debug(
            "Shadowcast FOV from (%d,%d) radius %d -> %d visible tiles",
            origin_x,
            origin_y,
            radius,
            len(visible),
        )
        return visible

    def _cast_light(
        self,
        transparency: TransparencyMap,
        visible: Set[Coord],
        cx: int,
        cy: int,
        row: int,
        start: float,
        end: float,
        radius: int,
        xx: int,
        xy: int,
        yx: int,
        yy: int,
    ) -> None:
        if start < end:
            return
        radius_squared = radius * radius
        new_start = start
        for j in range(row, radius + 1):
            dx, dy = -j - 1, -j
            blocked = False
            while dx <= 0:
                dx += 1
                x = cx + dx * xx + dy * xy
                y = cy + dx * yx + dy * yy
                l_slope = (dx - 0.5) / (dy + 0.5)
                r_slope = (dx + 0.5) / (dy - 0.5)
                if start < r_slope:
                    continue
                if end > l_slope:
                    break

                in_bounds = transparency.in_bounds(x, y)
                if in_bounds and dx * dx + dy * dy <= radius_squared:
                    visible.add((x, y))

                opaque = not in_bounds or not transparency.is_transparent(x, y)
                if blocked:
                    if opaque:
                        new_start = r_slope
                        continue
                    blocked = False
                    start = new_start
                elif opaque and j < radius:
                    blocked = True
                    self._cast_light(
                        transparency, visible, cx, cy, j + 1, start, l_slope, radius, xx, xy, yx, yy
                    )
                    new_start = r_slope
            if blocked:
                break


__all__ = ["ShadowcastFov"]
