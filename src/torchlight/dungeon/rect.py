from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class Rect:
    """Axis-aligned room bounds; the outer corners are walls, the interior is carved."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rect":
        return cls(x, y, x + w, y + h)

    def center(self) -> Tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: "Rect") -> bool:
        # Closed intervals on the outer corners: rooms that merely touch also count.
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.y1 + 1, self.y2):
            for x in range(self.x1 + 1, self.x2):
                yield x, y
