from enum import Enum, auto


class SessionEvent(Enum):
    """Events emitted by DungeonSession to notify the UI."""

    OBSERVER_MOVED = auto()
    LIGHT_ADDED = auto()
    LIGHT_REMOVED = auto()
    MAP_REGENERATED = auto()
    FRAME_UPDATED = auto()
