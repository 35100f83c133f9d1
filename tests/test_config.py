from pathlib import Path

import pytest
import yaml

from minirogue.config import GenerationSettings
from minirogue.exceptions import ConfigError, MiniRogueError


def test_packaged_defaults_match_dataclass():
    loaded = GenerationSettings.load()
    assert loaded == GenerationSettings()
    assert (loaded.map_width, loaded.map_height) == (50, 30)


def test_user_overlay_is_deep_merged(tmp_path: Path):
    user = tmp_path / "generation.yaml"
    user.write_text(yaml.safe_dump({"map": {"width": 64}, "seed": 77}), encoding="utf-8")
    s = GenerationSettings.load(user)
    assert s.map_width == 64
    assert s.map_height == 30, "Untouched keys keep their defaults"
    assert s.seed == 77


def test_missing_user_file_falls_back(tmp_path: Path):
    s = GenerationSettings.load(tmp_path / "nope.yaml")
    assert s == GenerationSettings()


def test_invalid_overlay_raises_config_error(tmp_path: Path):
    user = tmp_path / "bad.yaml"
    user.write_text(yaml.safe_dump({"rooms": {"min_size": 9, "max_size": 5}}), encoding="utf-8")
    with pytest.raises(ConfigError):
        GenerationSettings.load(user)

    user.write_text(yaml.safe_dump({"map": {"width": "wide"}}), encoding="utf-8")
    with pytest.raises(ConfigError):
        GenerationSettings.load(user)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"map_width": 0},
        {"room_max_size": 30},
        {"spawn_room_size": 2},
        {"spawn_room_inset": 0},
        {"map_width": 12, "map_height": 6, "room_max_size": 3, "room_min_size": 2},
        {"seed": -1},
    ],
)
def test_validate_rejects_bad_values(kwargs):
    with pytest.raises(ConfigError):
        GenerationSettings(**kwargs).validate()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MINIROGUE_WIDTH", "60")
    monkeypatch.setenv("MINIROGUE_HEIGHT", "40")
    monkeypatch.setenv("MINIROGUE_MAX_ROOMS", "12")
    monkeypatch.setenv("MINIROGUE_SEED", "42")
    s = GenerationSettings.from_env()
    assert (s.map_width, s.map_height, s.max_rooms, s.seed) == (60, 40, 12, 42)


def test_env_override_keeps_base_untouched(monkeypatch):
    base = GenerationSettings(max_rooms=6)
    monkeypatch.setenv("MINIROGUE_MAX_ROOMS", "8")
    s = GenerationSettings.from_env(base)
    assert s.max_rooms == 8
    assert base.max_rooms == 6


def test_env_non_integer_raises(monkeypatch):
    monkeypatch.setenv("MINIROGUE_SEED", "abc")
    with pytest.raises(ConfigError) as exc:
        GenerationSettings.from_env()
    assert isinstance(exc.value, MiniRogueError)


def test_save_roundtrip(tmp_path: Path):
    path = tmp_path / "out" / "generation.yaml"
    saved = GenerationSettings(map_width=40, seed=5)
    saved.save(path)
    assert GenerationSettings.load(path) == saved
