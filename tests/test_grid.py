import pytest

from torchlight.map.grid import Grid
from torchlight.map.tiles import Tile


def test_new_grid_is_all_walls():
    grid = Grid(4, 3)
    assert grid.width == 4
    assert grid.height == 3
    for x, y in grid.coords():
        tile = grid.get(x, y)
        assert tile.blocked and tile.block_sight
        assert tile.explored is False
        assert tile.light_intensity == 0.0
    assert grid.floor_count() == 0


def test_tiles_are_distinct_objects():
    grid = Grid(3, 3)
    grid.get(1, 1).carve()
    assert grid.is_walkable(1, 1)
    assert not grid.is_walkable(0, 0)
    assert not grid.is_walkable(2, 2)


def test_out_of_bounds_access_raises():
    grid = Grid(5, 4)
    for x, y in [(-1, 0), (0, -1), (5, 0), (0, 4), (10, 10)]:
        with pytest.raises(IndexError):
            grid.get(x, y)
    assert grid.in_bounds(4, 3)
    assert not grid.in_bounds(5, 3)


def test_negative_x_does_not_wrap_to_previous_row():
    grid = Grid.from_ascii([
        "..#",
        "#..",
    ])
    # (-1, 1) would be index 2 in a naive flat buffer, i.e. the wall at (2, 0)
    with pytest.raises(IndexError):
        grid[-1, 1]


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Grid(0, 3)
    with pytest.raises(ValueError):
        Grid(3, 0)


def test_from_ascii_and_back():
    rows = [
        "#####",
        "#...#",
        "#.#.#",
        "#####",
    ]
    grid = Grid.from_ascii(rows)
    assert grid.to_ascii() == rows
    assert grid.is_transparent(1, 1)
    assert not grid.is_transparent(2, 2)
    assert grid.floor_count() == 5

    with pytest.raises(ValueError):
        Grid.from_ascii(["..", "."])
    with pytest.raises(ValueError):
        Grid.from_ascii([])


def test_clear_light_resets_every_tile():
    grid = Grid.from_ascii(["...", "..."])
    for _, _, tile in grid.tiles():
        tile.light_intensity = 0.7
    grid.clear_light()
    assert all(tile.light_intensity == 0.0 for _, _, tile in grid.tiles())


def test_setitem_replaces_tile():
    grid = Grid(2, 2)
    grid[1, 0] = Tile.empty()
    assert grid.is_walkable(1, 0)
    with pytest.raises(IndexError):
        grid[2, 0] = Tile.empty()


def test_brightness_is_clamped_view():
    tile = Tile.empty()
    tile.light_intensity = 1.7
    assert tile.brightness == 1.0
    assert tile.light_intensity == pytest.approx(1.7)
    tile.light_intensity = -0.05
    assert tile.brightness == 0.0


def test_signature_tracks_layout():
    a = Grid.from_ascii(["#.#", "..."])
    b = Grid.from_ascii(["#.#", "..."])
    c = Grid.from_ascii(["#.#", "..#"])
    assert a.signature() == b.signature()
    assert a.signature() != c.signature()
