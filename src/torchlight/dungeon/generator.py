from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..map.grid import Coord, Grid
from ..rng import RandomLike, RandomSource
from .rect import Rect

logger = logging.getLogger(__name__)


class RoomsGenerator:
    """Rooms + corridors generator.

    Places up to ``max_rooms`` rectangular rooms by rejection sampling: each
    candidate is tried once and dropped if it touches an accepted room, so
    fewer rooms than requested is normal. Each accepted room after the first
    is joined to the one accepted just before it by an L-shaped corridor whose
    bend direction is a coin toss.
    """

    def __init__(
        self,
        max_rooms: int = 30,
        room_min_size: int = 6,
        room_max_size: int = 10,
    ) -> None:
        if max_rooms < 0:
            raise ValueError("max_rooms must be >= 0")
        if room_min_size < 2:
            # A 1-wide room has no interior to carve.
            raise ValueError("room_min_size must be >= 2")
        if room_min_size > room_max_size:
            raise ValueError("room_min_size must be <= room_max_size")
        self.max_rooms = max_rooms
        self.room_min_size = room_min_size
        self.room_max_size = room_max_size

    def generate(self, width: int, height: int, rng: Optional[RandomLike] = None) -> Tuple[Grid, Coord]:
        grid, start, _ = self.generate_with_rooms(width, height, rng)
        return grid, start

    def generate_with_rooms(
        self, width: int, height: int, rng: Optional[RandomLike] = None
    ) -> Tuple[Grid, Coord, List[Rect]]:
        """Like ``generate`` but also returns the accepted rooms in placement order."""
        if self.room_max_size >= width or self.room_max_size >= height:
            raise ValueError(
                f"room_max_size {self.room_max_size} does not fit a {width}x{height} grid"
            )
        rng = rng if rng is not None else RandomSource()
        grid = Grid(width, height)

        rooms: List[Rect] = []
        start: Coord = (0, 0)

        for _ in range(self.max_rooms):
            w = rng.randint(self.room_min_size, self.room_max_size)
            h = rng.randint(self.room_min_size, self.room_max_size)
            x = rng.randint(0, width - w - 1)
            y = rng.randint(0, height - h - 1)
            new_room = Rect.from_size(x, y, w, h)

            if any(new_room.intersects(other) for other in rooms):
                continue

            self._carve_room(grid, new_room)
            new_x, new_y = new_room.center()

            if not rooms:
                start = (new_x, new_y)
            else:
                prev_x, prev_y = rooms[-1].center()
                if rng.random() < 0.5:
                    self._carve_h_corridor(grid, prev_x, new_x, prev_y)
                    self._carve_v_corridor(grid, prev_y, new_y, new_x)
                else:
                    self._carve_v_corridor(grid, prev_y, new_y, prev_x)
                    self._carve_h_corridor(grid, prev_x, new_x, new_y)

            rooms.append(new_room)

        if not rooms:
            logger.warning(
                "RoomsGenerator: no rooms placed on %dx%d grid (max_rooms=%d); map is solid rock",
                width,
                height,
                self.max_rooms,
            )
        else:
            logger.info(
                "RoomsGenerator: placed %d/%d rooms on %dx%d grid, start at %s",
                len(rooms),
                self.max_rooms,
                width,
                height,
                start,
            )
        return grid, start, rooms

    @staticmethod
    def _carve_room(grid: Grid, room: Rect) -> None:
        for x, y in room.interior():
            grid.get(x, y).carve()

    @staticmethod
    def _carve_h_corridor(grid: Grid, x1: int, x2: int, y: int) -> None:
        if x2 < x1:
            x1, x2 = x2, x1
        for x in range(x1, x2 + 1):
            grid.get(x, y).carve()

    @staticmethod
    def _carve_v_corridor(grid: Grid, y1: int, y2: int, x: int) -> None:
        if y2 < y1:
            y1, y2 = y2, y1
        for y in range(y1, y2 + 1):
            grid.get(x, y).carve()


def generate_dungeon(
    width: int,
    height: int,
    max_rooms: int,
    room_min_size: int,
    room_max_size: int,
    rng: Optional[RandomLike] = None,
) -> Tuple[Grid, Coord]:
    """Generate a rooms-and-corridors map and the player's start position.

    Returns an all-wall grid with start (0, 0) when no room could be placed.
    """
    generator = RoomsGenerator(
        max_rooms=max_rooms,
        room_min_size=room_min_size,
        room_max_size=room_max_size,
    )
    return generator.generate(width, height, rng)


__all__ = ["RoomsGenerator", "generate_dungeon"]
