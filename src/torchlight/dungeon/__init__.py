from .rect import Rect
from .generator import RoomsGenerator, generate_dungeon

__all__ = ["Rect", "RoomsGenerator", "generate_dungeon"]
