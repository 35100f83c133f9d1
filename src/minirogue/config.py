from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class GenerationSettings:
    """Shared constants for dungeon generation.

    Floor-type policies derive their room counts and size ranges from these
    values; the map dimensions are fixed for the lifetime of a generated floor.
    """

    map_width: int = 50
    map_height: int = 30
    max_rooms: int = 10
    room_min_size: int = 4
    room_max_size: int = 8
    tile_size: int = 32
    spawn_room_size: int = 5
    spawn_room_inset: int = 2
    seed: Optional[int] = None

    def validate(self) -> "GenerationSettings":
        for name in ("map_width", "map_height", "max_rooms", "room_min_size", "room_max_size", "tile_size"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0 (got {getattr(self, name)})")
        if self.room_min_size > self.room_max_size:
            raise ConfigError(
                f"room_min_size ({self.room_min_size}) must not exceed room_max_size ({self.room_max_size})"
            )
        if self.spawn_room_size < 3:
            raise ConfigError("spawn_room_size must be at least 3")
        if self.spawn_room_inset < 1:
            raise ConfigError("spawn_room_inset must be at least 1")
        reach = self.spawn_room_inset + self.spawn_room_size + 1
        if reach > self.map_width or reach > self.map_height:
            raise ConfigError("spawn room does not fit inside the map")
        # Boss floors widen rooms by 2; both variants must still fit with a border.
        if self.room_max_size + 2 >= min(self.map_width, self.map_height) - 1:
            raise ConfigError("room_max_size is too large for the map dimensions")
        if self.seed is not None and self.seed < 0:
            raise ConfigError("seed must be non-negative")
        return self

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "GenerationSettings":
        defaults = cls()
        map_cfg = data.get("map", {}) or {}
        rooms_cfg = data.get("rooms", {}) or {}
        spawn_cfg = data.get("spawn_room", {}) or {}
        try:
            seed = data.get("seed")
            settings = cls(
                map_width=int(map_cfg.get("width", defaults.map_width)),
                map_height=int(map_cfg.get("height", defaults.map_height)),
                max_rooms=int(rooms_cfg.get("max_rooms", defaults.max_rooms)),
                room_min_size=int(rooms_cfg.get("min_size", defaults.room_min_size)),
                room_max_size=int(rooms_cfg.get("max_size", defaults.room_max_size)),
                tile_size=int(data.get("tile_size", defaults.tile_size)),
                spawn_room_size=int(spawn_cfg.get("size", defaults.spawn_room_size)),
                spawn_room_inset=int(spawn_cfg.get("inset", defaults.spawn_room_inset)),
                seed=int(seed) if seed is not None else None,
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid generation settings: {exc}") from exc
        return settings.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "map": {"width": self.map_width, "height": self.map_height},
            "rooms": {
                "max_rooms": self.max_rooms,
                "min_size": self.room_min_size,
                "max_size": self.room_max_size,
            },
            "spawn_room": {"size": self.spawn_room_size, "inset": self.spawn_room_inset},
            "tile_size": self.tile_size,
            "seed": self.seed,
        }

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "GenerationSettings":
        """Load settings from built-in defaults and optional user override file.

        If user_path is provided and exists, overlay values onto defaults.
        """
        try:
            with resources.files("minirogue.data").joinpath("generation.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default generation settings not found; falling back to dataclass defaults.")
            default_data = cls().to_dict()

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user generation settings from %s", user_path)
            else:
                logger.warning("User generation settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls._from_dict(merged)
        logger.debug("Generation settings merged: %s", settings)
        return settings

    @classmethod
    def from_env(cls, base: Optional["GenerationSettings"] = None) -> "GenerationSettings":
        """Overlay MINIROGUE_* environment variables onto ``base`` (or defaults)."""
        settings = dataclasses.replace(base) if base is not None else cls()
        env_map = {
            "MINIROGUE_WIDTH": "map_width",
            "MINIROGUE_HEIGHT": "map_height",
            "MINIROGUE_MAX_ROOMS": "max_rooms",
            "MINIROGUE_SEED": "seed",
        }
        for env_key, attr in env_map.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                setattr(settings, attr, int(raw))
            except ValueError as exc:
                raise ConfigError(f"{env_key} must be an integer (got {raw!r})") from exc
            logger.debug("Generation setting %s overridden from %s", attr, env_key)
        return settings.validate()

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved generation settings to %s", path)
