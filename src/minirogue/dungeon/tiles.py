from __future__ import annotations

from enum import Enum
from typing import Any, List

from .geometry import Position


class TileType(Enum):
    """Dungeon tile types.

    - WALL: Non-walkable obstacle
    - FLOOR: Walkable open tile carved by rooms and corridors
    - STAIRS: Walkable tile leading to the next floor
    - BOSS_ROOM: Walkable marker for the boss encounter
    - UPGRADER_SPAWN: Walkable marker where the upgrader appears (bonus floors)
    - ENTRANCE: Walkable marker stamped by level linking
    """

    WALL = "wall"
    FLOOR = "floor"
    STAIRS = "stairs"
    BOSS_ROOM = "bossRoom"
    UPGRADER_SPAWN = "upgraderSpawn"
    ENTRANCE = "entrance"

    @property
    def type_name(self) -> str:
        return self.value

    @property
    def is_walkable(self) -> bool:
        return self is not TileType.WALL

    @property
    def glyph(self) -> str:
        """A single-character visualization useful for logs/debug."""
        return {
            TileType.WALL: "#",
            TileType.FLOOR: ".",
            TileType.STAIRS: ">",
            TileType.BOSS_ROOM: "B",
            TileType.UPGRADER_SPAWN: "U",
            TileType.ENTRANCE: "<",
        }[self]


class Tile:
    """A single grid cell.

    The type and position are fixed at construction. Items resting on the tile
    are held by reference only; whoever created them owns them.
    """

    __slots__ = ("_tile_type", "_position", "_items", "_explored")

    def __init__(self, tile_type: TileType, position: Position) -> None:
        self._tile_type = tile_type
        self._position = position
        self._items: List[Any] = []
        self._explored = False

    @property
    def tile_type(self) -> TileType:
        return self._tile_type

    @property
    def position(self) -> Position:
        return self._position

    @property
    def is_walkable(self) -> bool:
        return self._tile_type.is_walkable

    @property
    def items(self) -> List[Any]:
        return list(self._items)

    def add_item(self, item: Any) -> None:
        if item is not None:
            self._items.append(item)

    def remove_item(self, item: Any) -> bool:
        try:
            self._items.remove(item)
        except ValueError:
            return False
        return True

    def has_items(self) -> bool:
        return bool(self._items)

    def clear_items(self) -> None:
        self._items.clear()

    @property
    def explored(self) -> bool:
        return self._explored

    def set_explored(self) -> None:
        self._explored = True

    def reset_exploration(self) -> None:
        self._explored = False

    def __repr__(self) -> str:
        return f"Tile({self._tile_type.type_name} at ({self._position.x},{self._position.y}), items={len(self._items)})"
