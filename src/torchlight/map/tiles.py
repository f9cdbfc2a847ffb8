from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Tile:
    """A single map cell.

    - blocked: impassable to movement
    - block_sight: opaque to vision and light
    - explored: has been visible to the observer at least once
    - light_intensity: accumulated light for the current frame, >= 0 and uncapped
    """

    blocked: bool = False
    block_sight: bool = False
    explored: bool = False
    light_intensity: float = 0.0

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, block_sight=True)

    @classmethod
    def empty(cls) -> "Tile":
        return cls(blocked=False, block_sight=False)

    @property
    def is_wall(self) -> bool:
        return self.block_sight

    @property
    def brightness(self) -> float:
        """Light intensity clamped to [0, 1] for display."""
        return max(0.0, min(1.0, self.light_intensity))

    def carve(self) -> None:
        """Turn this tile into floor, keeping its explored memory."""
        self.blocked = False
        self.block_sight = False


__all__ = ["Tile"]
