import random
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from minirogue.dungeon.map import DungeonMap  # noqa: E402
from minirogue.dungeon.policy import FloorType  # noqa: E402

SEEDS = list(range(40))


class RecordingEnemy:
    """Minimal enemy that remembers where it was moved."""

    def __init__(self):
        self.x = None
        self.y = None
        self.moves = 0

    def move_to(self, x, y):
        self.x = x
        self.y = y
        self.moves += 1


@pytest.fixture
def enemy():
    return RecordingEnemy()


@pytest.fixture
def regular_map():
    return DungeonMap(1, FloorType.REGULAR, rng=random.Random(1234))


@pytest.fixture
def boss_map():
    return DungeonMap(2, FloorType.BOSS, rng=random.Random(1234))


@pytest.fixture
def bonus_map():
    return DungeonMap(3, FloorType.BONUS, rng=random.Random(1234))


def seeded_maps(floor_type, floor=3, seeds=SEEDS):
    for seed in seeds:
        yield seed, DungeonMap(floor, floor_type, rng=random.Random(seed))
