from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from .geometry import Position, Room
from .grid import GridBuilder
from .policy import BOSS_STAIRS_RADIUS, MEDIUM_ROOM_AREA, FloorPolicy, StairsRule
from .tiles import TileType

logger = logging.getLogger(__name__)


def find_largest_room_excluding_spawn(rooms: Sequence[Room]) -> Optional[Room]:
    """Largest room by area, ignoring rooms[0]. Ties keep the earliest room."""
    best: Optional[Room] = None
    for room in rooms[1:]:
        if best is None or room.area > best.area:
            best = room
    return best


def find_farthest_room_from_spawn(rooms: Sequence[Room]) -> Optional[Room]:
    if len(rooms) < 2:
        return None
    spawn_center = rooms[0].center()
    best: Optional[Room] = None
    best_distance = 0.0
    for room in rooms[1:]:
        distance = room.center().distance_to(spawn_center)
        if best is None or distance > best_distance:
            best = room
            best_distance = distance
    return best


def find_medium_room(rooms: Sequence[Room], exclude: Optional[Room] = None) -> Optional[Room]:
    """First non-spawn room (other than ``exclude``) whose area falls in the
    medium band; falls back to any such room. Needs at least three rooms."""
    if len(rooms) < 3:
        return None
    candidates = [r for r in rooms[1:] if r != exclude]
    lo, hi = MEDIUM_ROOM_AREA
    for room in candidates:
        if lo <= room.area <= hi:
            return room
    return candidates[0] if candidates else None


class SpecialRoomSelector:
    """Chooses the boss, stairs and upgrader locations and stamps marker tiles."""

    def __init__(self, builder: GridBuilder, rooms: Sequence[Room], policy: FloorPolicy, rng: random.Random) -> None:
        self.builder = builder
        self.rooms: List[Room] = list(rooms)
        self.policy = policy
        self.rng = rng
        self.boss_position: Optional[Position] = None
        self.boss_room: Optional[Room] = None
        self.stairs_position: Optional[Position] = None
        self.upgrader_position: Optional[Position] = None

    def run(self) -> None:
        if self.policy.has_boss:
            self.place_boss()
        self.place_stairs()
        if self.policy.has_upgrader:
            self.place_upgrader()

    # ---- Boss ------------------------------------------------------------
    def place_boss(self) -> Optional[Position]:
        room = find_largest_room_excluding_spawn(self.rooms)
        if room is None:
            logger.debug("Boss floor has no room besides spawn; no boss placed")
            return None
        pos = room.center()
        self.builder.stamp(pos, TileType.BOSS_ROOM)
        self.boss_room = room
        self.boss_position = pos
        return pos

    # ---- Stairs ----------------------------------------------------------
    def place_stairs(self) -> Optional[Position]:
        rule = self.policy.stairs_rule
        if rule is StairsRule.NEAR_BOSS:
            pos = self._stairs_near_boss()
        elif rule is StairsRule.EXIT_ROOM:
            pos = self._stairs_in_exit_room()
        else:
            pos = self._stairs_in_farthest_room()
        if pos is None:
            logger.debug("No stairs placed (%s, %d rooms)", rule.value, len(self.rooms))
            return None
        self.builder.stamp(pos, TileType.STAIRS)
        self.stairs_position = pos
        return pos

    def _stairs_near_boss(self) -> Optional[Position]:
        if self.boss_position is None or self.boss_room is None:
            return None
        bx, by = self.boss_position.x, self.boss_position.y
        r = BOSS_STAIRS_RADIUS
        for dx in range(-r, r + 1):
            for dy in range(-r, r + 1):
                if dx == 0 and dy == 0:
                    continue
                p = Position(bx + dx, by + dy)
                if self.boss_room.contains_position(p) and self.builder.tile_type_at(p.x, p.y) is TileType.FLOOR:
                    return p
        fallback = self.builder.random_open_floor_in_room(self.boss_room, self.rng)
        if fallback is not None and fallback != self.boss_position:
            return fallback
        return None

    def _stairs_in_exit_room(self) -> Optional[Position]:
        exit_room = self.exit_room()
        if exit_room is None:
            return None
        return self.builder.random_open_floor_in_room(exit_room, self.rng)

    def _stairs_in_farthest_room(self) -> Optional[Position]:
        room = find_farthest_room_from_spawn(self.rooms)
        if room is None:
            return None
        return self.builder.random_open_floor_in_room(room, self.rng)

    def exit_room(self) -> Optional[Room]:
        """Third generated room; the last room when only two were placed."""
        if len(self.rooms) >= 3:
            return self.rooms[2]
        if len(self.rooms) == 2:
            return self.rooms[1]
        return None

    # ---- Upgrader --------------------------------------------------------
    def upgrader_room(self) -> Optional[Room]:
        if len(self.rooms) < 3:
            return None
        if self.policy.upgrader_in_second_room:
            return self.rooms[1]
        return find_medium_room(self.rooms, exclude=self.boss_room)

    def place_upgrader(self) -> Optional[Position]:
        room = self.upgrader_room()
        if room is None:
            return None
        pos = room.center()
        if not self.builder.stamp(pos, TileType.UPGRADER_SPAWN):
            return None
        self.upgrader_position = pos
        return pos
