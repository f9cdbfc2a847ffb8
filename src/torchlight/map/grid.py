from __future__ import annotations

import hashlib
import logging
from typing import Iterable, Iterator, List, Sequence, Tuple

from .tiles import Tile

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class Grid:
    """
    Rectangular map of Tiles stored in a flat buffer indexed by ``y * width + x``.

    Coordinate system is 0-based: x in [0, width), y in [0, height).
    Every tile starts as a wall. Out-of-bounds access raises IndexError;
    use ``in_bounds`` when probing.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid width/height must be > 0")
        self._width = width
        self._height = height
        self._tiles: List[Tile] = [Tile.wall() for _ in range(width * height)]
        logger.debug("Grid created: %dx%d", width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x},{y}) out of bounds for {self._width}x{self._height} grid")
        return y * self._width + x

    def get(self, x: int, y: int) -> Tile:
        return self._tiles[self._index(x, y)]

    def __getitem__(self, pos: Coord) -> Tile:
        x, y = pos
        return self.get(x, y)

    def __setitem__(self, pos: Coord, tile: Tile) -> None:
        x, y = pos
        self._tiles[self._index(x, y)] = tile

    def is_transparent(self, x: int, y: int) -> bool:
        return not self.get(x, y).block_sight

    def is_walkable(self, x: int, y: int) -> bool:
        return not self.get(x, y).blocked

    def coords(self) -> Iterator[Coord]:
        for y in range(self._height):
            for x in range(self._width):
                yield x, y

    def tiles(self) -> Iterator[Tuple[int, int, Tile]]:
        for idx, tile in enumerate(self._tiles):
            yield idx % self._width, idx // self._width, tile

    def clear_light(self) -> None:
        """Reset every tile's light intensity before a new frame is accumulated."""
        for tile in self._tiles:
            tile.light_intensity = 0.0

    def floor_count(self) -> int:
        return sum(1 for tile in self._tiles if not tile.blocked)

    @classmethod
    def from_ascii(cls, rows: Sequence[str], wall_chars: Iterable[str] = ("#",)) -> "Grid":
        """
        Build a Grid from ASCII rows for tests/tools.
        - Any char in wall_chars becomes a wall (blocked and opaque).
        - All others are floor.
        """
        if not rows:
            raise ValueError("rows must not be empty")
        height = len(rows)
        width = len(rows[0])
        for r in rows:
            if len(r) != width:
                raise ValueError("All rows must be same width")
        grid = cls(width, height)
        wall_set = set(wall_chars)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch not in wall_set:
                    grid.get(x, y).carve()
        return grid

    def to_ascii(self, wall: str = "#", floor: str = ".") -> List[str]:
        rows: List[str] = []
        for y in range(self._height):
            start = y * self._width
            row = self._tiles[start:start + self._width]
            rows.append("".join(wall if t.blocked else floor for t in row))
        return rows

    def signature(self) -> str:
        """Deterministic digest of the walkable layout."""
        raw = "\n".join(self.to_ascii()).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    def __repr__(self) -> str:
        return f"Grid({self._width}x{self._height})"


__all__ = ["Coord", "Grid"]
