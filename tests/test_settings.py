from __future__ import annotations

import logging
import os
import textwrap

import pytest

from torchlight.config import Settings, build_settings, parse_args
from torchlight.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    # Keep a developer's configs/torchlight.yaml or env out of these tests
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TORCHLIGHT_"):
            monkeypatch.delenv(key)


def test_defaults():
    s = Settings.load(env={})
    assert (s.map_width, s.map_height) == (80, 45)
    assert (s.room_min_size, s.room_max_size, s.max_rooms) == (6, 10, 30)
    assert s.fov_light_walls is True
    assert s.light_jitter_stddev == pytest.approx(0.05)
    assert s.seed is None


def test_env_overrides():
    env = {
        "TORCHLIGHT_MAP_WIDTH": "40",
        "TORCHLIGHT_FOV_LIGHT_WALLS": "off",
        "TORCHLIGHT_LIGHT_JITTER_STDDEV": "0.1",
        "TORCHLIGHT_SEED": "77",
        "TORCHLIGHT_TORCH_RADIUS": "",
    }
    s = Settings.load(env=env)
    assert s.map_width == 40
    assert s.fov_light_walls is False
    assert s.light_jitter_stddev == pytest.approx(0.1)
    assert s.seed == 77
    assert s.torch_radius == 8


def test_bad_env_value_is_logged_and_skipped(caplog):
    with caplog.at_level(logging.ERROR):
        s = Settings.load(env={"TORCHLIGHT_MAX_ROOMS": "many"})
    assert s.max_rooms == 30
    assert "TORCHLIGHT_MAX_ROOMS" in caplog.text


def test_yaml_sections_and_precedence(tmp_path):
    path = tmp_path / "torchlight.yaml"
    path.write_text(
        textwrap.dedent(
            """
            seed: 5
            map:
              map_width: 50
              map_height: 30
              max_rooms: 12
            lighting:
              torch_radius: 6
            """
        ),
        encoding="utf-8",
    )
    s = Settings.load(config_path=path, env={"TORCHLIGHT_MAX_ROOMS": "9"}, overrides={"seed": 8, "sight_radius": None})
    assert (s.map_width, s.map_height) == (50, 30)
    assert s.torch_radius == 6
    assert s.max_rooms == 9  # env beats file
    assert s.seed == 8  # explicit beats env and file
    assert s.sight_radius == 10  # None overrides are ignored


def test_config_path_from_env(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("fps: 30\n", encoding="utf-8")
    s = Settings.load(env={"TORCHLIGHT_CONFIG": str(path)})
    assert s.fps == 30


def test_default_config_file_is_discovered(tmp_path):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "torchlight.yaml").write_text("max_rooms: 3\n", encoding="utf-8")
    assert Settings.load(env={}).max_rooms == 3


def test_invalid_yaml_raises_config_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("map: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        Settings.load(config_path=path, env={})

    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        Settings.load(config_path=path, env={})


def test_wrongly_typed_yaml_values_are_logged_and_dropped(tmp_path, caplog):
    path = tmp_path / "typed.yaml"
    path.write_text(
        textwrap.dedent(
            """
            map:
              map_width: wide
              map_height: "30"
              max_rooms: [1, 2]
            fov:
              fov_light_walls: "no"
            """
        ),
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING):
        s = Settings.load(config_path=path, env={})
    assert s.map_width == 80
    assert s.map_height == 30
    assert s.max_rooms == 30
    assert s.fov_light_walls is False
    assert "map_width" in caplog.text
    assert "max_rooms" in caplog.text


def test_unknown_keys_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        s = Settings.from_dict({"map_width": 60, "colour": "red"})
    assert s.map_width == 60
    assert "colour" in caplog.text


def test_validate_normalizes_values():
    s = Settings(
        map_width=-1,
        map_height=20,
        room_min_size=1,
        room_max_size=200,
        max_rooms=-3,
        sight_radius=-2,
        light_jitter_stddev=-0.5,
        fps=0,
    )
    s.validate()
    assert (s.map_width, s.map_height) == (80, 45)
    assert s.room_min_size == 2
    assert s.room_max_size == 44
    assert s.max_rooms == 0
    assert s.sight_radius == 0
    assert s.light_jitter_stddev == 0.0
    assert s.fps == 1


def test_validate_keeps_room_sizes_ordered():
    s = Settings(map_width=10, map_height=8, room_min_size=9, room_max_size=12)
    s.validate()
    assert s.room_max_size == 7
    assert s.room_min_size == 7


def test_cli_flags_build_settings():
    args = parse_args(["--seed", "3", "--width", "30", "--room-max", "7", "generate", "--format", "json"])
    assert args.command == "generate"
    assert args.format == "json"
    s = build_settings(args, env={})
    assert s.seed == 3
    assert s.map_width == 30
    assert s.room_max_size == 7
    assert s.map_height == 45


def test_cli_defaults_to_generate():
    args = parse_args([])
    assert args.command == "generate"
    assert args.format == "ascii"
    assert args.lit is False
