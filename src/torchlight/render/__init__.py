from .palette import RGB, Palette, TileView, lerp_color, shade_tiles

__all__ = ["RGB", "Palette", "TileView", "lerp_color", "shade_tiles"]
