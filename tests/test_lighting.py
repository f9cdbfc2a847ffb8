import math

import pytest

from torchlight.fov.shadowcast import ShadowcastFov
from torchlight.fov.visibility import VisibilityEngine
from torchlight.lighting import LightingEngine, LightSource, light_contribution
from torchlight.map.grid import Grid
from torchlight.rng import RandomSource

OPEN = ["..........."] * 11


class FixedJitter:
    """RNG stub whose gauss draws come from a list."""

    def __init__(self, *values):
        self.values = list(values)

    def randint(self, a, b):
        return a

    def random(self):
        return 0.0

    def gauss(self, mu, sigma):
        return self.values.pop(0)


def make_scene(rows=OPEN, rng=None, jitter=0.0):
    grid = Grid.from_ascii(rows)
    engine = VisibilityEngine(grid)
    lighting = LightingEngine(rng if rng is not None else RandomSource(7), jitter_stddev=jitter)
    return grid, engine, lighting


def test_falloff_without_jitter():
    grid, vis, lighting = make_scene()
    lighting.accumulate(grid, [LightSource(5, 5, 5)], vis)
    assert grid.get(5, 5).light_intensity == pytest.approx(1.0)
    assert grid.get(6, 5).light_intensity == pytest.approx(0.8)
    assert grid.get(8, 9).light_intensity == pytest.approx(0.0)  # distance 5
    assert grid.get(7, 7).light_intensity == pytest.approx(1 - math.sqrt(8) / 5)
    # distance sqrt(26) > 5: not reached
    assert grid.get(10, 6).light_intensity == 0.0
    assert grid.get(0, 0).light_intensity == 0.0


def test_jitter_is_bounded_and_shared_by_one_emitter():
    grid, vis, lighting = make_scene(rng=RandomSource(2024), jitter=0.05)
    lighting.accumulate(grid, [LightSource(5, 5, 4)], vis)
    center = grid.get(5, 5).light_intensity
    jitter = center - 1.0
    assert abs(jitter) < 0.3
    # At distance == radius only the jitter remains
    assert grid.get(9, 5).light_intensity == pytest.approx(jitter)
    assert grid.get(7, 5).light_intensity == pytest.approx(0.5 + jitter)


def test_two_emitters_add_up():
    grid, vis, lighting = make_scene(rng=FixedJitter(0.1, -0.02), jitter=0.05)
    a = LightSource(3, 5, 6)
    b = LightSource(7, 5, 4)
    lighting.accumulate(grid, [a, b], vis)

    expected = (1 - 2 / 6 + 0.1) + (1 - 2 / 4 - 0.02)
    assert grid.get(5, 5).light_intensity == pytest.approx(expected)
    # Uncapped until read
    assert grid.get(5, 5).light_intensity > 1.0
    assert grid.get(5, 5).brightness == 1.0


def test_sum_matches_individual_runs():
    grid, vis, lighting = make_scene()
    a = LightSource(2, 2, 5)
    b = LightSource(8, 3, 6)

    lighting.accumulate(grid, [a], vis)
    only_a = {(x, y): t.light_intensity for x, y, t in grid.tiles()}
    lighting.accumulate(grid, [b], vis)
    only_b = {(x, y): t.light_intensity for x, y, t in grid.tiles()}
    lighting.accumulate(grid, [a, b], vis)
    for x, y, tile in grid.tiles():
        assert tile.light_intensity == pytest.approx(only_a[(x, y)] + only_b[(x, y)])


def test_zero_radius_contributes_nothing():
    grid, vis, lighting = make_scene(rng=FixedJitter(), jitter=0.05)
    # FixedJitter has no values: sampling jitter for a dark source would raise
    lighting.accumulate(grid, [LightSource(5, 5, 0)], vis)
    assert all(tile.light_intensity == 0.0 for _, _, tile in grid.tiles())
    assert light_contribution(0.0, 0, 0.3) == 0.0


def test_light_is_cleared_each_frame():
    grid, vis, lighting = make_scene()
    lighting.accumulate(grid, [LightSource(5, 5, 3)], vis)
    lighting.accumulate(grid, [LightSource(5, 5, 3)], vis)
    assert grid.get(5, 5).light_intensity == pytest.approx(1.0)
    lighting.accumulate(grid, [], vis)
    assert grid.get(5, 5).light_intensity == 0.0


class CountingFov:
    def __init__(self):
        self.inner = ShadowcastFov()
        self.calls = 0

    def compute(self, transparency, origin_x, origin_y, radius, light_walls):
        self.calls += 1
        return self.inner.compute(transparency, origin_x, origin_y, radius, light_walls)


def test_sweeps_are_shared_within_a_pass_but_not_across_passes():
    grid = Grid.from_ascii(OPEN)
    algo = CountingFov()
    vis = VisibilityEngine(grid, algo)
    lighting = LightingEngine(RandomSource(7), jitter_stddev=0.0)

    twins = [LightSource(5, 5, 3), LightSource(5, 5, 3)]
    lighting.accumulate(grid, twins, vis)
    assert algo.calls == 1
    assert grid.get(5, 5).light_intensity == pytest.approx(2.0)

    lighting.accumulate(grid, twins, vis)
    assert algo.calls == 2
    assert len(vis._sweeps) == 1


def test_walls_stop_light():
    rows = [
        "...#...",
        "...#...",
        "...#...",
    ]
    grid, vis, lighting = make_scene(rows=rows)
    lighting.accumulate(grid, [LightSource(1, 1, 6)], vis)
    assert grid.get(3, 1).light_intensity > 0  # the wall face is lit
    for x in range(4, 7):
        for y in range(3):
            assert grid.get(x, y).light_intensity == 0.0


def test_emitter_light_does_not_mark_explored():
    grid, vis, lighting = make_scene()
    lighting.accumulate(grid, [LightSource(5, 5, 3)], vis)
    assert not any(tile.explored for _, _, tile in grid.tiles())


def test_negative_jitter_stddev_rejected():
    with pytest.raises(ValueError):
        LightingEngine(RandomSource(1), jitter_stddev=-0.1)
