from __future__ import annotations

import logging
from typing import Dict, Optional

from .actions import InputAction, InputEvent

logger = logging.getLogger(__name__)

ALT_PREFIX = "ALT+"


def key_name(key: Optional[str]) -> Optional[str]:
    """Canonical uppercase key name, or None for blank or non-string keys."""
    if not isinstance(key, str):
        return None
    name = key.strip().upper()
    return name or None


class InputMapper:
    """Rebindable mapping from key names to session intents.

    Backends translate their own key constants to names first (the arcade
    window tries every name arcade gives a code). Alt combinations are bound
    as ``ALT+ENTER`` and win over the plain key while Alt is held.

        mapper = InputMapper.default()
        mapper.translate_key("w")              # InputAction.MOVE_UP
        mapper.translate_key("enter", alt=True)  # InputAction.TOGGLE_FULLSCREEN
    """

    def __init__(self, bindings: Optional[Dict[str, InputAction]] = None) -> None:
        self._bindings: Dict[str, InputAction] = {}
        for key, action in (bindings or {}).items():
            self.bind(action, key)

    @property
    def bindings(self) -> Dict[str, InputAction]:
        return dict(self._bindings)

    def bind(self, action: InputAction, *keys: str) -> None:
        for key in keys:
            name = key_name(key)
            if name is None:
                logger.warning("Ignoring binding of %r to %s", key, action.name)
                continue
            self._bindings[name] = action

    def unbind(self, key: str) -> None:
        name = key_name(key)
        if name is not None:
            self._bindings.pop(name, None)

    def translate_key(self, key: Optional[str], *, alt: bool = False) -> Optional[InputAction]:
        name = key_name(key)
        if name is None:
            return None
        if alt and ALT_PREFIX + name in self._bindings:
            return self._bindings[ALT_PREFIX + name]
        return self._bindings.get(name)

    def on_key_event(
        self, key: Optional[str], pressed: bool, *, alt: bool = False, source: str = "keyboard"
    ) -> Optional[InputEvent]:
        action = self.translate_key(key, alt=alt)
        if action is None:
            return None
        return InputEvent(action=action, pressed=pressed, source=source)

    @classmethod
    def default(cls) -> "InputMapper":
        mapper = cls()
        mapper.bind(InputAction.MOVE_UP, "UP", "W")
        mapper.bind(InputAction.MOVE_DOWN, "DOWN", "S")
        mapper.bind(InputAction.MOVE_LEFT, "LEFT", "A")
        mapper.bind(InputAction.MOVE_RIGHT, "RIGHT", "D")
        mapper.bind(InputAction.ADD_LIGHT, "L", "SPACE")
        mapper.bind(InputAction.REGENERATE, "R")
        mapper.bind(InputAction.QUIT, "ESCAPE")
        # arcade names the Enter key both ENTER and RETURN
        mapper.bind(InputAction.TOGGLE_FULLSCREEN, "ALT+ENTER", "ALT+RETURN")
        return mapper


__all__ = ["InputMapper", "key_name"]
