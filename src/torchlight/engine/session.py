from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..config import Settings
from ..dungeon.generator import RoomsGenerator
from ..fov.base import FovAlgorithm
from ..fov.visibility import VisibilityEngine
from ..input.actions import InputAction, movement_delta
from ..lighting import LightingEngine, LightSource
from ..map.grid import Coord, Grid
from ..render.palette import TileView, shade_tiles
from ..rng import RandomLike, RandomSource
from .events import SessionEvent

logger = logging.getLogger(__name__)

Listener = Callable[[SessionEvent, "DungeonSession"], None]


@dataclass
class Observer:
    """The point of view: drives the visible set and explored memory.

    ``light_radius`` > 0 makes the observer carry its own light in addition
    to any placed emitters.
    """

    x: int
    y: int
    sight_radius: int
    light_radius: int = 0

    @property
    def pos(self) -> Coord:
        return self.x, self.y


class DungeonSession:
    """Owns one generated map plus the observer and light emitters walking it.

    ``update`` is the per-frame step: field of view is recomputed only when
    the observer moved since the previous frame (or when forced), lighting is
    re-accumulated every frame, and the combined per-tile view is returned.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rng: Optional[RandomLike] = None,
        algorithm: Optional[FovAlgorithm] = None,
        grid: Optional[Grid] = None,
        start: Optional[Coord] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rng: RandomLike = rng if rng is not None else RandomSource(self.settings.seed)
        self._generator = RoomsGenerator(
            max_rooms=self.settings.max_rooms,
            room_min_size=self.settings.room_min_size,
            room_max_size=self.settings.room_max_size,
        )
        if grid is None:
            grid, start = self._generator.generate(self.settings.map_width, self.settings.map_height, self.rng)
        self.grid: Grid = grid
        sx, sy = start if start is not None else (0, 0)
        self.observer = Observer(sx, sy, self.settings.sight_radius, self.settings.observer_light_radius)
        self.visibility = VisibilityEngine(self.grid, algorithm)
        self.lighting = LightingEngine(
            self.rng,
            jitter_stddev=self.settings.light_jitter_stddev,
            light_walls=self.settings.fov_light_walls,
        )
        self._emitters: Dict[int, LightSource] = {}
        self._next_light_id = 1
        self._last_fov_pos: Optional[Coord] = None
        self._listeners: List[Listener] = []
        logger.info("DungeonSession started on %r, observer at %s", self.grid, self.observer.pos)

    # ------------------------ Events ------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception as ex:  # pragma: no cover - listeners shouldn't crash the frame loop
                logger.exception("Listener errored on %s: %s", event, ex)

    # ------------------------ Movement ------------------------
    @property
    def observer_pos(self) -> Coord:
        return self.observer.pos

    def can_move(self, dx: int, dy: int) -> bool:
        if dx == 0 and dy == 0:
            return False
        tx, ty = self.observer.x + dx, self.observer.y + dy
        if not self.grid.in_bounds(tx, ty):
            return False
        return self.grid.is_walkable(tx, ty)

    def move_by(self, dx: int, dy: int) -> bool:
        """Move the observer by (dx, dy) unless the destination is blocked."""
        if not self.can_move(dx, dy):
            logger.debug("Blocked move by (%d, %d) from %s", dx, dy, self.observer.pos)
            return False
        self.observer.x += dx
        self.observer.y += dy
        logger.debug("Observer moved to %s", self.observer.pos)
        self._emit(SessionEvent.OBSERVER_MOVED)
        return True

    # ------------------------ Lights ------------------------
    @property
    def emitters(self) -> Dict[int, LightSource]:
        return dict(self._emitters)

    def add_light(self, x: int, y: int, radius: Optional[int] = None) -> int:
        """Place a light emitter and return its id."""
        if not self.grid.in_bounds(x, y):
            raise IndexError(f"Light position ({x},{y}) out of bounds for {self.grid!r}")
        radius = self.settings.torch_radius if radius is None else radius
        if radius < 0:
            raise ValueError("radius must be >= 0")
        light_id = self._next_light_id
        self._next_light_id += 1
        self._emitters[light_id] = LightSource(x, y, radius)
        logger.debug("Added light %d at (%d,%d) radius %d", light_id, x, y, radius)
        self._emit(SessionEvent.LIGHT_ADDED)
        return light_id

    def add_light_at_observer(self, radius: Optional[int] = None) -> int:
        return self.add_light(self.observer.x, self.observer.y, radius)

    def remove_light(self, light_id: int) -> bool:
        if self._emitters.pop(light_id, None) is None:
            return False
        self._emit(SessionEvent.LIGHT_REMOVED)
        return True

    def active_emitters(self) -> List[LightSource]:
        sources = list(self._emitters.values())
        if self.observer.light_radius > 0:
            sources.append(LightSource(self.observer.x, self.observer.y, self.observer.light_radius))
        return sources

    # ------------------------ Frame ------------------------
    def update(self, force_fov: bool = False) -> List[TileView]:
        """Run one frame: FOV if the observer moved, then lighting; return tile views."""
        self.visibility.begin_frame()
        if force_fov or self._last_fov_pos != self.observer.pos:
            self.visibility.compute_visible(
                self.observer.x,
                self.observer.y,
                self.observer.sight_radius,
                self.settings.fov_light_walls,
            )
            self._last_fov_pos = self.observer.pos
        self.lighting.accumulate(self.grid, self.active_emitters(), self.visibility)
        views = shade_tiles(self.grid, self.visibility.visible)
        self._emit(SessionEvent.FRAME_UPDATED)
        return views

    def handle(self, action: InputAction) -> bool:
        """Apply a gameplay intent; returns True when session state changed."""
        delta = movement_delta(action)
        if delta is not None:
            return self.move_by(*delta)
        if action is InputAction.ADD_LIGHT:
            self.add_light_at_observer()
            return True
        if action is InputAction.REGENERATE:
            self.regenerate()
            return True
        return False

    def regenerate(self) -> Tuple[Grid, Coord]:
        """Replace the whole map; lights are cleared and the observer respawns."""
        grid, start = self._generator.generate(self.settings.map_width, self.settings.map_height, self.rng)
        self.grid = grid
        self.visibility.rebind(grid)
        self.observer.x, self.observer.y = start
        self._emitters.clear()
        self._last_fov_pos = None
        logger.info("Map regenerated, observer at %s", start)
        self._emit(SessionEvent.MAP_REGENERATED)
        return grid, start


__all__ = ["DungeonSession", "Observer"]
