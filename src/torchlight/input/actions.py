from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Tuple


class InputAction(Enum):
    """Logical intents the dungeon session understands.

    Backends (arcade, a test harness) translate physical keys into these so
    the session never sees device details.
    """

    MOVE_UP = auto()
    MOVE_DOWN = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    ADD_LIGHT = auto()  # drop a torch at the observer's position
    REGENERATE = auto()  # replace the map with a freshly generated one
    TOGGLE_FULLSCREEN = auto()
    QUIT = auto()


_MOVE_DELTAS: Dict[InputAction, Tuple[int, int]] = {
    InputAction.MOVE_UP: (0, -1),
    InputAction.MOVE_DOWN: (0, 1),
    InputAction.MOVE_LEFT: (-1, 0),
    InputAction.MOVE_RIGHT: (1, 0),
}


def movement_delta(action: InputAction) -> Optional[Tuple[int, int]]:
    """(dx, dy) for a movement action, None for anything else. y grows downward."""
    return _MOVE_DELTAS.get(action)


@dataclass(frozen=True)
class InputEvent:
    """A press or release of a logical input action."""

    action: InputAction
    pressed: bool
    source: Optional[str] = None


__all__ = ["InputAction", "InputEvent", "movement_delta"]
