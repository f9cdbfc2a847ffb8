from .events import SessionEvent
from .session import DungeonSession, Observer

__all__ = ["DungeonSession", "Observer", "SessionEvent"]
