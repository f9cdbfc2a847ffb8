from __future__ import annotations

import argparse
import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TORCHLIGHT_"
CONFIG_ENV = "TORCHLIGHT_CONFIG"
DEFAULT_CONFIG_PATH = Path("configs/torchlight.yaml")

# YAML files may group keys under these sections; they are flattened on load.
_SECTIONS = ("map", "fov", "lighting", "app")


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey values into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive),
    non-empty strings evaluate to True if not matched otherwise.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
        return True
    return bool(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in {"", "none", "null", "random"}:
        return None
    return int(value)


# Casters shared by the env, YAML and override layers.
_CASTERS = {
    "map_width": int,
    "map_height": int,
    "room_min_size": int,
    "room_max_size": int,
    "max_rooms": int,
    "sight_radius": int,
    "fov_light_walls": _as_bool,
    "torch_radius": int,
    "observer_light_radius": int,
    "light_jitter_stddev": float,
    "seed": _optional_int,
    "fps": int,
    "tile_px": int,
}


@dataclass
class Settings:
    """Tunable parameters for generation, visibility, lighting and the window.

    Built with ``Settings.load()``, which layers (later wins):
    - dataclass defaults
    - a YAML file (``--config``, env TORCHLIGHT_CONFIG, or configs/torchlight.yaml if present)
    - environment variables (prefix TORCHLIGHT_)
    - explicit overrides (command line flags)
    """

    # Map generation
    map_width: int = 80
    map_height: int = 45
    room_min_size: int = 6
    room_max_size: int = 10
    max_rooms: int = 30

    # Field of view
    sight_radius: int = 10  # 0 means unlimited
    fov_light_walls: bool = True

    # Lighting
    torch_radius: int = 8
    observer_light_radius: int = 0  # > 0 makes the observer carry its own light
    light_jitter_stddev: float = 0.05

    # Runtime
    seed: Optional[int] = None
    fps: int = 20
    tile_px: int = 12

    def validate(self) -> None:
        """Normalize settings to safe values, logging anything that had to change."""
        defaults = Settings()
        # The smallest room (2x2 outer) needs a 3-tile span.
        if self.map_width < 3 or self.map_height < 3:
            logger.warning(
                "Invalid map size %sx%s; resetting to %sx%s",
                self.map_width,
                self.map_height,
                defaults.map_width,
                defaults.map_height,
            )
            self.map_width, self.map_height = defaults.map_width, defaults.map_height

        if self.room_min_size < 2:
            logger.warning("room_min_size %s too small; using 2", self.room_min_size)
            self.room_min_size = 2
        largest_fit = min(self.map_width, self.map_height) - 1
        if self.room_max_size > largest_fit:
            logger.warning(
                "room_max_size %s does not fit a %sx%s map; clamping to %s",
                self.room_max_size,
                self.map_width,
                self.map_height,
                largest_fit,
            )
            self.room_max_size = largest_fit
        if self.room_min_size > self.room_max_size:
            logger.warning(
                "room_min_size %s exceeds room_max_size %s; lowering it",
                self.room_min_size,
                self.room_max_size,
            )
            self.room_min_size = self.room_max_size

        if self.max_rooms < 0:
            logger.warning("max_rooms %s is negative; using 0", self.max_rooms)
            self.max_rooms = 0
        for name in ("sight_radius", "torch_radius", "observer_light_radius"):
            if getattr(self, name) < 0:
                logger.warning("%s %s is negative; using 0", name, getattr(self, name))
                setattr(self, name, 0)
        if self.light_jitter_stddev < 0:
            logger.warning("light_jitter_stddev %s is negative; using 0", self.light_jitter_stddev)
            self.light_jitter_stddev = 0.0
        self.light_jitter_stddev = float(self.light_jitter_stddev)
        self.fov_light_walls = bool(self.fov_light_walls)
        self.fps = max(1, int(self.fps))
        self.tile_px = max(1, int(self.tile_px))

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build validated settings; unknown keys and uncastable values are logged and dropped."""
        unknown = set(data) - set(_CASTERS)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
        filtered: Dict[str, Any] = {}
        for key, value in data.items():
            caster = _CASTERS.get(key)
            if caster is None:
                continue
            try:
                filtered[key] = caster(value)
            except (TypeError, ValueError) as exc:
                logger.warning("Ignoring invalid value for %s=%r: %s", key, value, exc)
        obj = cls(**filtered)
        obj.validate()
        return obj

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Collect overrides from TORCHLIGHT_* environment variables."""
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        for field_name, caster in _CASTERS.items():
            env_key = ENV_PREFIX + field_name.upper()
            if env_key in env and env[env_key] != "":
                try:
                    out[field_name] = caster(env[env_key])
                except ValueError as exc:
                    logger.error("Invalid env for %s=%r: %s", env_key, env[env_key], exc)
        return out

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        """Read a YAML settings file; keys may be flat or grouped under map/fov/lighting/app."""
        if not path.exists():
            logger.debug("Settings file not found: %s", path)
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse settings YAML {path}: {exc}") from exc
        if doc is None:
            return {}
        if not isinstance(doc, dict):
            raise ConfigError(f"Settings YAML {path} must contain a mapping at the top level")
        flat: Dict[str, Any] = {}
        for section in _SECTIONS:
            if isinstance(doc.get(section), dict):
                flat.update(doc[section])
        for k, v in doc.items():
            if isinstance(v, dict):
                continue
            flat[k] = v
        logger.debug("Loaded %d settings from %s", len(flat), path)
        return flat

    @classmethod
    def discover_config_path(cls, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        explicit = env.get(CONFIG_ENV)
        if explicit:
            return Path(explicit)
        if DEFAULT_CONFIG_PATH.exists():
            return DEFAULT_CONFIG_PATH
        return None

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "Settings":
        data: Dict[str, Any] = {}
        path = config_path or cls.discover_config_path(env)
        if path is not None:
            data.update(cls.from_yaml_file(path))
        data.update(cls.from_env(env))
        if overrides:
            data.update({k: v for k, v in overrides.items() if v is not None})
        settings = cls.from_dict(data)
        logger.debug("Effective settings: %s", settings.as_dict())
        return settings


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="torchlight",
        description="Generate torch-lit dungeons and walk them.",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible maps")
    parser.add_argument("--width", dest="map_width", type=int, default=None, help="Map width in tiles")
    parser.add_argument("--height", dest="map_height", type=int, default=None, help="Map height in tiles")
    parser.add_argument("--max-rooms", dest="max_rooms", type=int, default=None)
    parser.add_argument("--room-min", dest="room_min_size", type=int, default=None)
    parser.add_argument("--room-max", dest="room_max_size", type=int, default=None)
    parser.add_argument("--sight-radius", dest="sight_radius", type=int, default=None)
    parser.add_argument("--torch-radius", dest="torch_radius", type=int, default=None)
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command")
    gen = sub.add_parser("generate", help="Generate a map and print it")
    gen.add_argument("--format", choices=("ascii", "json"), default="ascii")
    gen.add_argument(
        "--lit",
        action="store_true",
        help="Compute the observer's view from the start position and show unexplored tiles blank",
    )
    sub.add_parser("play", help="Open an arcade window and explore the map")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "generate"
        args.format = "ascii"
        args.lit = False
    return args


_OVERRIDE_FIELDS = (
    "seed",
    "map_width",
    "map_height",
    "max_rooms",
    "room_min_size",
    "room_max_size",
    "sight_radius",
    "torch_radius",
)


def build_settings(args: argparse.Namespace, env: Optional[Mapping[str, str]] = None) -> Settings:
    overrides = {name: getattr(args, name, None) for name in _OVERRIDE_FIELDS}
    return Settings.load(config_path=args.config, env=env, overrides=overrides)


__all__ = ["Settings", "build_settings", "parse_args"]
