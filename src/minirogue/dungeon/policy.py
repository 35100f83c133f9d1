"""
Per-floor-type generation policy.

A :class:`FloorPolicy` bundles every number and rule that differs between
regular, boss and bonus floors so that one shared pipeline can generate all
three. Shared placement constants live at module level.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..config import GenerationSettings

# Enemies never start closer than this to the player (Euclidean tiles).
ENEMY_MIN_START_DISTANCE = 6.0
# Rooms at least this large may hold two enemies; smaller rooms hold one.
DENSE_ROOM_AREA = 12
LARGE_ROOM_ENEMY_CAP = 2
SMALL_ROOM_ENEMY_CAP = 1
SECOND_ENEMY_ATTEMPTS = 10
# Fill pass: share of attempts aimed at rooms (rest go to corridors).
FILL_ROOM_SHARE = 0.70
FILL_ATTEMPTS_PER_ITEM = 10
# Medium-area band for the generalized upgrader room selector.
MEDIUM_ROOM_AREA = (12, 25)
# Half-width of the square searched around the boss for boss-floor stairs.
BOSS_STAIRS_RADIUS = 2


class FloorType(Enum):
    REGULAR = "regular"
    BOSS = "boss"
    BONUS = "bonus"


class StairsRule(Enum):
    FARTHEST_FROM_SPAWN = "farthest_from_spawn"
    NEAR_BOSS = "near_boss"
    EXIT_ROOM = "exit_room"


def room_enemy_cap(area: int) -> int:
    return LARGE_ROOM_ENEMY_CAP if area >= DENSE_ROOM_AREA else SMALL_ROOM_ENEMY_CAP


@dataclass(frozen=True)
class RoomBatch:
    """Keep placing rooms until the map holds ``target_total`` rooms (spawn
    room included) or ``max_attempts`` candidates have been tried."""

    target_total: int
    min_size: int
    max_size: int
    max_attempts: int


@dataclass(frozen=True)
class FloorPolicy:
    floor_type: FloorType
    room_batches: Tuple[RoomBatch, ...]
    safe_distance: float
    corridor_width: int
    stairs_rule: StairsRule
    has_boss: bool = False
    has_upgrader: bool = False
    # Bonus layout reserves room 1 for the upgrader; otherwise pick a medium room.
    upgrader_in_second_room: bool = False
    # Enemy quota = max(enemy_floor, min(floor + enemy_base, enemy_cap))
    enemy_base: int = 0
    enemy_cap: int = 0
    enemy_floor: int = 0
    min_enemies: int = 0
    first_enemy_chance: float = 0.0
    second_enemy_chance: float = 0.0
    # Item quota = min(floor + item_base, item_cap)
    item_base: int = 0
    item_cap: int = 0
    item_chance_with_enemy: float = 0.0
    item_chance_without_enemy: float = 0.0
    # Bonus floors roll once for a small optional enemy group and carry a key.
    floor_enemy_chance: float = 1.0
    bonus_enemy_range: Tuple[int, int] = (0, 0)
    key_item_only: bool = False

    def enemy_quota(self, floor: int) -> int:
        return max(self.enemy_floor, min(floor + self.enemy_base, self.enemy_cap))

    def item_quota(self, floor: int) -> int:
        return min(floor + self.item_base, self.item_cap)

    @classmethod
    def for_floor_type(cls, floor_type: FloorType, settings: GenerationSettings) -> "FloorPolicy":
        lo, hi = settings.room_min_size, settings.room_max_size
        if floor_type is FloorType.BOSS:
            target = max(2, settings.max_rooms // 2)
            return cls(
                floor_type=floor_type,
                room_batches=(RoomBatch(target, lo, hi + 2, target * 3),),
                safe_distance=8.0,
                corridor_width=2,
                stairs_rule=StairsRule.NEAR_BOSS,
                has_boss=True,
                enemy_base=3,
                enemy_cap=10,
                enemy_floor=4,
                min_enemies=3,
                first_enemy_chance=0.95,
                second_enemy_chance=0.40,
                item_base=12,
                item_cap=30,
                item_chance_with_enemy=0.98,
                item_chance_without_enemy=0.80,
            )
        if floor_type is FloorType.BONUS:
            return cls(
                floor_type=floor_type,
                room_batches=(RoomBatch(2, 5, 6, 30), RoomBatch(3, 5, 6, 30)),
                safe_distance=4.0,
                corridor_width=3,
                stairs_rule=StairsRule.EXIT_ROOM,
                has_upgrader=True,
                upgrader_in_second_room=True,
                floor_enemy_chance=0.25,
                bonus_enemy_range=(1, 2),
                key_item_only=True,
            )
        return cls(
            floor_type=FloorType.REGULAR,
            room_batches=(RoomBatch(settings.max_rooms, lo, hi, settings.max_rooms * 3),),
            safe_distance=8.0,
            corridor_width=2,
            stairs_rule=StairsRule.FARTHEST_FROM_SPAWN,
            enemy_base=6,
            enemy_cap=18,
            first_enemy_chance=0.90,
            second_enemy_chance=0.30,
            item_base=15,
            item_cap=35,
            item_chance_with_enemy=0.95,
            item_chance_without_enemy=0.70,
        )
