from __future__ import annotations

import logging
from typing import Dict, List, Optional

try:
    import arcade  # type: ignore
except ImportError:  # pragma: no cover - optional for test envs
    arcade = None

from ..config import Settings
from ..engine.events import SessionEvent
from ..engine.session import DungeonSession
from ..input import InputAction, InputMapper
from ..render.palette import Palette

logger = logging.getLogger(__name__)

OBSERVER_COLOR = (255, 255, 255)
TORCH_COLOR = (255, 140, 0)


def _key_names() -> Dict[int, List[str]]:
    # Several names share a code (UP and MOTION_UP, ENTER and RETURN).
    names: Dict[int, List[str]] = {}
    for name in dir(arcade.key):
        if name.isupper() and not name.startswith("MOD_"):
            value = getattr(arcade.key, name)
            if isinstance(value, int):
                names.setdefault(value, []).append(name)
    return names


class DungeonWindow:
    """Arcade window drawing one tile sprite per map cell.

    Tile colours come from the palette each frame; unexplored tiles are
    hidden. Rendering is not covered by tests, the session underneath is.
    """

    def __init__(self, session: DungeonSession, mapper: Optional[InputMapper] = None, palette: Optional[Palette] = None):
        if arcade is None:
            raise RuntimeError("Arcade package is not installed; cannot create window")
        self.session = session
        self.mapper = mapper or InputMapper.default()
        self.palette = palette or Palette()
        self.tile_px = session.settings.tile_px
        self._key_names = _key_names()

        width = session.grid.width * self.tile_px
        height = session.grid.height * self.tile_px
        self._window = arcade.Window(width, height, title="Torchlight")
        self._window.set_update_rate(1 / session.settings.fps)
        self._window.on_draw = self.on_draw
        self._window.on_update = self.on_update
        self._window.on_key_press = self.on_key_press

        self._tiles = arcade.SpriteList()
        self._tile_sprites: List = []
        self._markers = arcade.SpriteList()
        self._build_tiles()
        session.add_listener(self._on_event)
        logger.info("Arcade window initialized (%dx%d)", width, height)

    def _center(self, x: int, y: int):
        cx = x * self.tile_px + self.tile_px / 2
        cy = (self.session.grid.height - 1 - y) * self.tile_px + self.tile_px / 2
        return cx, cy

    def _build_tiles(self) -> None:
        self._tiles.clear()
        self._tile_sprites = []
        for x, y in self.session.grid.coords():
            cx, cy = self._center(x, y)
            sprite = arcade.SpriteSolidColor(self.tile_px, self.tile_px, cx, cy, (0, 0, 0))
            sprite.visible = False
            self._tiles.append(sprite)
            self._tile_sprites.append(sprite)

    def _rebuild_markers(self) -> None:
        self._markers.clear()
        size = max(2, self.tile_px // 2)
        for light in self.session.emitters.values():
            if self.session.visibility.is_visible(light.x, light.y):
                cx, cy = self._center(light.x, light.y)
                self._markers.append(arcade.SpriteSolidColor(size, size, cx, cy, TORCH_COLOR))
        cx, cy = self._center(*self.session.observer_pos)
        self._markers.append(arcade.SpriteSolidColor(size, size, cx, cy, OBSERVER_COLOR))

    def _on_event(self, event: SessionEvent, session: DungeonSession) -> None:
        if event is SessionEvent.MAP_REGENERATED:
            self._build_tiles()

    def run(self) -> None:
        arcade.run()

    def on_update(self, delta_time: float) -> None:
        views = self.session.update()
        for view, sprite in zip(views, self._tile_sprites):
            color = self.palette.color_for(view)
            if color is None:
                sprite.visible = False
                continue
            sprite.visible = True
            sprite.color = color
        self._rebuild_markers()

    def on_draw(self) -> None:
        self._window.clear()
        self._tiles.draw()
        self._markers.draw()

    def on_key_press(self, symbol: int, modifiers: int) -> None:
        alt = bool(modifiers & arcade.key.MOD_ALT)
        action = None
        for name in self._key_names.get(symbol, ()):
            action = self.mapper.translate_key(name, alt=alt)
            if action is not None:
                break
        if action is None:
            return
        if action is InputAction.QUIT:
            arcade.exit()
        elif action is InputAction.TOGGLE_FULLSCREEN:
            self._window.set_fullscreen(not self._window.fullscreen)
        else:
            self.session.handle(action)


def run(settings: Optional[Settings] = None) -> None:  # pragma: no cover - manual usage
    """Launch an interactive window for exploring a generated map."""
    if arcade is None:
        raise RuntimeError("Arcade is not installed. Please install 'arcade' to run the app.")
    session = DungeonSession(settings or Settings.load())
    window = DungeonWindow(session)
    window.run()
