"""
Dungeon floor model.

A :class:`DungeonMap` is generated completely inside its constructor:

    walls -> spawn room -> rooms -> corridors -> connectivity repair
          -> boss / stairs / upgrader markers -> enemy and item planning

After construction the map is long-lived level state. Game logic reads it
through the accessors below and mutates it only by placing or removing items,
marking tiles explored, and stamping level entrances.
"""
from __future__ import annotations

import logging
import random
from typing import Any, List, Optional, Tuple, Union

from ..config import GenerationSettings
from ..exceptions import InvalidEnemyError
from ..rng import RNGManager
from .connectivity import ensure_connected
from .corridors import CorridorCarver
from .geometry import Position, Room
from .grid import GridBuilder, TileGrid
from .interfaces import PlaceableEnemy
from .placement import PlacementPlanner
from .policy import FloorPolicy, FloorType
from .rooms import RoomGenerator
from .special_rooms import SpecialRoomSelector
from .tiles import Tile

logger = logging.getLogger(__name__)


class DungeonMap:
    """One generated dungeon floor.

    Args:
        floor: Current floor number. Only scales enemy and item counts.
        floor_type: Regular, boss or bonus layout.
        rng: Randomness source. When omitted, a seed from ``settings`` is used
            if present, otherwise an unseeded ``random.Random``.
        settings: Generation constants; dataclass defaults when omitted.
    """

    def __init__(
        self,
        floor: int,
        floor_type: FloorType = FloorType.REGULAR,
        rng: Optional[random.Random] = None,
        settings: Optional[GenerationSettings] = None,
    ) -> None:
        self._settings = settings if settings is not None else GenerationSettings()
        self._floor = floor
        self._floor_type = floor_type
        self._policy = FloorPolicy.for_floor_type(floor_type, self._settings)
        if rng is None:
            if self._settings.seed is not None:
                rng = RNGManager(self._settings.seed).floor_rng(floor, floor_type)
            else:
                rng = random.Random()
        self._rng = rng

        builder = GridBuilder(self._settings.map_width, self._settings.map_height)
        self._rooms, self._player_start = self._generate_layout(builder)

        selector = SpecialRoomSelector(builder, self._rooms, self._policy, self._rng)
        selector.run()
        self._boss_position: Optional[Position] = selector.boss_position
        self._stairs_position: Optional[Position] = selector.stairs_position
        self._upgrader_position: Optional[Position] = selector.upgrader_position

        planner = PlacementPlanner(
            builder,
            self._rooms,
            self._policy,
            floor,
            self._player_start,
            self._rng,
            boss_room=selector.boss_room,
            exit_room=selector.exit_room() if self._policy.key_item_only else None,
        )
        planner.populate()
        self._enemy_locations: List[Position] = list(planner.enemy_locations)
        self._item_locations: List[Position] = list(planner.item_locations)

        self._grid: TileGrid = builder.build()
        logger.info(
            "Generated %s floor %d: %d rooms, %d enemies, %d items, boss=%s, stairs=%s",
            floor_type.value,
            floor,
            len(self._rooms),
            len(self._enemy_locations),
            len(self._item_locations),
            self._boss_position,
            self._stairs_position,
        )

    def _generate_layout(self, builder: GridBuilder) -> Tuple[List[Room], Position]:
        room_gen = RoomGenerator(builder, self._policy, self._settings, self._rng)
        room_gen.create_spawn_room()
        player_start = room_gen.spawn_center
        rooms = room_gen.generate()

        carver = CorridorCarver(builder, self._policy.corridor_width, self._rng)
        carver.connect_all(rooms)
        ensure_connected(builder, rooms, player_start, carver)
        return rooms, player_start

    # ---- Grid queries ----------------------------------------------------
    def get_tile(self, x: Union[int, Position], y: Optional[int] = None) -> Optional[Tile]:
        """Tile at ``(x, y)`` or at a :class:`Position`; ``None`` when out of bounds."""
        if isinstance(x, Position):
            return self._grid.get_tile(x.x, x.y)
        if y is None:
            raise TypeError("get_tile() needs a Position or both x and y")
        return self._grid.get_tile(x, y)

    def is_valid_move(self, position: Position) -> bool:
        return self._grid.is_walkable(position.x, position.y)

    @property
    def grid(self) -> TileGrid:
        return self._grid

    # ---- Mutation --------------------------------------------------------
    def place_item(self, item: Any, position: Position) -> bool:
        """Put ``item`` on the tile at ``position``. Returns True if it landed."""
        if item is None:
            return False
        tile = self.get_tile(position)
        if tile is None or not tile.is_walkable:
            return False
        tile.add_item(item)
        return True

    def place_enemy(self, enemy: Optional[PlaceableEnemy], position: Position) -> bool:
        """Move ``enemy`` to the pixel coordinates of ``position``.

        Raises:
            InvalidEnemyError: If ``enemy`` is None.
        """
        if enemy is None:
            raise InvalidEnemyError("place_enemy() requires an enemy")
        tile = self.get_tile(position)
        if tile is None or not tile.is_walkable:
            return False
        size = self._settings.tile_size
        enemy.move_to(position.x * size, position.y * size)
        return True

    def set_entrance_tile(self, position: Position) -> None:
        """Stamp ENTRANCE at ``position``. Out-of-bounds positions are ignored."""
        self._grid.mark_entrance(position)

    # ---- Planning output (copies) ----------------------------------------
    def get_item_locations(self) -> List[Position]:
        return list(self._item_locations)

    def get_enemy_locations(self) -> List[Position]:
        return list(self._enemy_locations)

    def get_rooms(self) -> List[Room]:
        return list(self._rooms)

    # ---- Direct reads ----------------------------------------------------
    def get_width(self) -> int:
        return self._grid.width

    def get_height(self) -> int:
        return self._grid.height

    def get_current_floor(self) -> int:
        return self._floor

    def get_floor_type(self) -> FloorType:
        return self._floor_type

    def get_player_start_position(self) -> Position:
        return self._player_start

    def get_boss_position(self) -> Optional[Position]:
        return self._boss_position

    def get_stairs_position(self) -> Optional[Position]:
        return self._stairs_position

    def get_upgrader_position(self) -> Optional[Position]:
        return self._upgrader_position

    # ---- Random open floor -----------------------------------------------
    def get_random_floor_position_in_room(self, room: Room) -> Optional[Position]:
        return self._grid.random_open_floor_in_room(room, self._rng)

    def get_random_corridor_position(self) -> Optional[Position]:
        return self._grid.random_corridor_floor(self._rooms, self._rng)

    # ---- Export / Compare ------------------------------------------------
    def to_str_lines(self) -> List[str]:
        return self._grid.to_str_lines(start=self._player_start)

    def snapshot(self) -> Tuple[Tuple[str, ...], ...]:
        return self._grid.snapshot()

    def __repr__(self) -> str:
        return (
            f"DungeonMap(floor={self._floor}, type={self._floor_type.value}, "
            f"{self.get_width()}x{self.get_height()}, rooms={len(self._rooms)})"
        )
