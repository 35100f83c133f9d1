import logging

import pytest

from minirogue.config import GenerationSettings
from minirogue.dungeon.factory import DungeonFactory
from minirogue.dungeon.map import DungeonMap
from minirogue.dungeon.policy import FloorType
from minirogue.logging_config import configure_logging
from minirogue.rng import RNGManager


def test_rng_manager_same_seed_same_stream():
    a = RNGManager("seed-A").floor_rng(3, FloorType.REGULAR)
    b = RNGManager("seed-A").floor_rng(3, FloorType.REGULAR)
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def test_floor_rng_differs_by_floor_and_type():
    rngm = RNGManager(1234)
    first = rngm.floor_rng(1, FloorType.REGULAR).random()
    assert first != rngm.floor_rng(2, FloorType.REGULAR).random()
    assert first != rngm.floor_rng(1, FloorType.BOSS).random()
    assert rngm.derive_seed("floor_layout", 1, "regular") != rngm.derive_seed("floor_layout", 1, "boss")


def test_floor_rng_accepts_type_name():
    rngm = RNGManager(1234)
    by_enum = rngm.floor_rng(4, FloorType.BONUS)
    by_name = rngm.floor_rng(4, "bonus")
    assert by_enum.getstate() == by_name.getstate()


def test_map_and_factory_share_floor_seeding():
    settings = GenerationSettings(seed=31)
    for floor_type in FloorType:
        direct = DungeonMap(6, floor_type, rng=RNGManager(31).floor_rng(6, floor_type), settings=settings)
        from_settings = DungeonMap(6, floor_type, settings=settings)
        from_factory = DungeonFactory.generate(6, floor_type, settings=settings)
        assert direct.snapshot() == from_settings.snapshot() == from_factory.snapshot()
        assert direct.get_item_locations() == from_factory.get_item_locations()


def test_rng_manager_seed_canonicalization():
    assert RNGManager(" abc ").get_master_seed_hex() == RNGManager("abc").get_master_seed_hex()
    assert RNGManager(0).get_master_seed_hex() == "00"
    with pytest.raises(ValueError):
        RNGManager(-5)
    with pytest.raises(TypeError):
        RNGManager(1.5)


def test_unseeded_manager_generates_master_seed():
    rngm = RNGManager(None)
    assert len(rngm.get_master_seed_hex()) == 32


@pytest.mark.parametrize("floor_type", list(FloorType))
def test_factory_same_seed_same_floor(floor_type):
    settings = GenerationSettings()
    a = DungeonFactory.generate(5, floor_type, seed=2024, settings=settings)
    b = DungeonFactory.generate(5, floor_type, seed=2024, settings=settings)
    assert a.snapshot() == b.snapshot()
    assert a.get_rooms() == b.get_rooms()
    assert a.get_enemy_locations() == b.get_enemy_locations()
    assert a.get_item_locations() == b.get_item_locations()
    assert a.get_boss_position() == b.get_boss_position()


def test_factory_different_floors_differ():
    settings = GenerationSettings()
    a = DungeonFactory.generate(5, seed="run-1", settings=settings)
    b = DungeonFactory.generate(6, seed="run-1", settings=settings)
    assert a.snapshot() != b.snapshot() or a.get_item_locations() != b.get_item_locations()


def test_settings_seed_used_when_no_rng_given():
    settings = GenerationSettings(seed=77)
    a = DungeonMap(2, FloorType.REGULAR, settings=settings)
    b = DungeonFactory.generate(2, FloorType.REGULAR, settings=settings)
    assert a.snapshot() == b.snapshot()


def test_custom_settings_change_dimensions():
    settings = GenerationSettings(map_width=60, map_height=40, max_rooms=14)
    dmap = DungeonFactory.generate(1, seed=3, settings=settings)
    assert (dmap.get_width(), dmap.get_height()) == (60, 40)
    assert len(dmap.get_rooms()) <= 14


def test_generation_logs_summary(caplog):
    with caplog.at_level(logging.INFO, logger="minirogue"):
        DungeonFactory.generate(1, FloorType.BOSS, seed=11, settings=GenerationSettings())
    assert any("Generated boss floor 1" in rec.getMessage() for rec in caplog.records)


def test_configure_logging_honours_env(monkeypatch):
    monkeypatch.setenv("MINIROGUE_LOG_LEVEL", "warning")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        configure_logging()
        assert root.level == logging.WARNING
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
