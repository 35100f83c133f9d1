"""
Enemy and item placement planning.

The planner only chooses positions. Whoever consumes the finished map decides
what enemy or item actually appears at each planned position.

Order of passes for regular and boss floors:

1. Enemies, rooms largest first, respecting the per-room density cap.
2. Boss floors only: top up enemies to the policy minimum.
3. One item attempt per room, likelier where an enemy already stands.
4. Fill up to the item quota from random rooms (70%) or corridors (30%).
5. Final pass: every non-spawn, non-boss room that is still empty gets an item.

Enemies and items never share a tile. Bonus floors roll once for a small
enemy group and get exactly one item, the key in the exit room.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Set

from .geometry import Position, Room
from .grid import GridBuilder
from .policy import (
    ENEMY_MIN_START_DISTANCE,
    FILL_ATTEMPTS_PER_ITEM,
    FILL_ROOM_SHARE,
    SECOND_ENEMY_ATTEMPTS,
    FloorPolicy,
    room_enemy_cap,
)

logger = logging.getLogger(__name__)


class PlacementPlanner:
    def __init__(
        self,
        builder: GridBuilder,
        rooms: Sequence[Room],
        policy: FloorPolicy,
        floor: int,
        player_start: Position,
        rng: random.Random,
        boss_room: Optional[Room] = None,
        exit_room: Optional[Room] = None,
    ) -> None:
        self.builder = builder
        self.rooms: List[Room] = list(rooms)
        self.policy = policy
        self.floor = floor
        self.player_start = player_start
        self.rng = rng
        self.boss_room = boss_room
        self.exit_room = exit_room
        self.enemy_locations: List[Position] = []
        self.item_locations: List[Position] = []
        # Mirrors of the lists for O(1) duplicate checks
        self._enemy_set: Set[Position] = set()
        self._item_set: Set[Position] = set()

    # ---- Entry point -----------------------------------------------------
    def populate(self) -> None:
        if self.policy.key_item_only:
            self._populate_bonus()
        else:
            self._populate_standard()
        logger.debug(
            "Planned %d enemies and %d items on %s floor %d",
            len(self.enemy_locations),
            len(self.item_locations),
            self.policy.floor_type.value,
            self.floor,
        )

    def _populate_standard(self) -> None:
        enemy_quota = self.policy.enemy_quota(self.floor)
        item_quota = self.policy.item_quota(self.floor)
        self.place_room_enemies(enemy_quota)
        if self.policy.min_enemies:
            self.top_up_enemies(self.policy.min_enemies)
        placed = self.place_room_items(item_quota)
        self.fill_items(item_quota, placed)
        self.fill_empty_rooms()

    def _populate_bonus(self) -> None:
        if self.rng.random() < self.policy.floor_enemy_chance:
            lo, hi = self.policy.bonus_enemy_range
            self.place_bonus_enemies(self.rng.randint(lo, hi))
        self.place_key_item()

    # ---- Helpers ---------------------------------------------------------
    def candidate_rooms(self) -> List[Room]:
        """Rooms eligible for room-level content: no spawn room, no boss room."""
        return [room for room in self.rooms[1:] if room != self.boss_room]

    def is_valid_enemy_position(self, pos: Position) -> bool:
        return pos.distance_to(self.player_start) >= ENEMY_MIN_START_DISTANCE

    def is_free(self, pos: Position) -> bool:
        return pos not in self._enemy_set and pos not in self._item_set

    def enemies_in(self, room: Room) -> int:
        return sum(1 for p in self.enemy_locations if room.contains_position(p))

    def items_in(self, room: Room) -> int:
        return sum(1 for p in self.item_locations if room.contains_position(p))

    def _add_enemy(self, pos: Position) -> None:
        self.enemy_locations.append(pos)
        self._enemy_set.add(pos)

    def _add_item(self, pos: Position) -> None:
        self.item_locations.append(pos)
        self._item_set.add(pos)

    def _try_enemy_in(self, room: Room) -> bool:
        pos = self.builder.random_open_floor_in_room(room, self.rng)
        if pos is None or not self.is_valid_enemy_position(pos) or not self.is_free(pos):
            return False
        self._add_enemy(pos)
        return True

    def _try_item_at(self, pos: Optional[Position]) -> bool:
        if pos is None or not self.is_free(pos):
            return False
        self._add_item(pos)
        return True

    # ---- Enemies ---------------------------------------------------------
    def place_room_enemies(self, quota: int) -> int:
        """Walk candidate rooms from largest to smallest. Each room rolls for a
        first enemy; a successful first enemy in a dense room may be followed
        by a second one."""
        placed = 0
        by_area = sorted(self.candidate_rooms(), key=lambda r: r.area, reverse=True)
        for room in by_area:
            if placed >= quota:
                break
            if self.rng.random() >= self.policy.first_enemy_chance:
                continue
            cap = room_enemy_cap(room.area)
            in_room = 0
            if self._try_enemy_in(room):
                placed += 1
                in_room += 1
            if in_room and cap > 1 and self.rng.random() < self.policy.second_enemy_chance:
                attempts = 0
                while in_room < cap and placed < quota and attempts < SECOND_ENEMY_ATTEMPTS:
                    attempts += 1
                    if self._try_enemy_in(room):
                        placed += 1
                        in_room += 1
        return placed

    def top_up_enemies(self, minimum: int) -> int:
        """Add single enemies round-robin until ``minimum`` is reached.

        Only runs when at least ``minimum`` candidate rooms exist. Room caps
        still apply and the attempt budget is bounded.
        """
        rooms = self.candidate_rooms()
        if len(rooms) < minimum:
            return 0
        added = 0
        attempts = 0
        budget = minimum * len(rooms) * SECOND_ENEMY_ATTEMPTS
        while len(self.enemy_locations) < minimum and attempts < budget:
            open_rooms = [r for r in rooms if self.enemies_in(r) < room_enemy_cap(r.area)]
            if not open_rooms:
                break
            for room in open_rooms:
                attempts += 1
                if self._try_enemy_in(room):
                    added += 1
                    break
        if len(self.enemy_locations) < minimum:
            logger.debug("Enemy top-up stopped at %d/%d", len(self.enemy_locations), minimum)
        return added

    def place_bonus_enemies(self, count: int) -> int:
        placed = 0
        for room in self.rooms[1:]:
            if placed >= count:
                break
            if self._try_enemy_in(room):
                placed += 1
        return placed

    # ---- Items -----------------------------------------------------------
    def place_room_items(self, quota: int) -> int:
        placed = 0
        for room in self.candidate_rooms():
            chance = (
                self.policy.item_chance_with_enemy
                if self.enemies_in(room)
                else self.policy.item_chance_without_enemy
            )
            if self.rng.random() < chance and placed < quota:
                if self._try_item_at(self.builder.random_open_floor_in_room(room, self.rng)):
                    placed += 1
        return placed

    def fill_items(self, quota: int, placed: int) -> int:
        fill_rooms = self.rooms[1:]
        if not fill_rooms:
            return placed
        attempts = 0
        max_attempts = quota * FILL_ATTEMPTS_PER_ITEM
        while placed < quota and attempts < max_attempts:
            attempts += 1
            if self.rng.random() < FILL_ROOM_SHARE:
                room = fill_rooms[self.rng.randrange(len(fill_rooms))]
                pos = self.builder.random_open_floor_in_room(room, self.rng)
            else:
                pos = self.builder.random_corridor_floor(self.rooms, self.rng)
            if self._try_item_at(pos):
                placed += 1
        if placed < quota:
            logger.debug("Item fill stopped at %d/%d after %d attempts", placed, quota, attempts)
        return placed

    def place_key_item(self) -> Optional[Position]:
        if self.exit_room is None:
            return None
        free = [p for p in self.builder.open_floor_in_room(self.exit_room) if self.is_free(p)]
        if not free:
            logger.debug("Exit room has no free open floor for the key item")
            return None
        pos = free[self.rng.randrange(len(free))]
        self._add_item(pos)
        return pos

    def fill_empty_rooms(self) -> int:
        added = 0
        for room in self.candidate_rooms():
            if self.enemies_in(room) or self.items_in(room):
                continue
            if self._try_item_at(self.builder.random_open_floor_in_room(room, self.rng)):
                added += 1
            else:
                logger.debug("Room at (%d,%d) has no free open floor; left empty", room.x, room.y)
        return added
