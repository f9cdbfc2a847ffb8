from .tiles import Tile
from .grid import Coord, Grid

__all__ = ["Tile", "Coord", "Grid"]
