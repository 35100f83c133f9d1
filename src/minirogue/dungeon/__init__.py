"""
Dungeon floor generation for minirogue.

Contains the tile grid, room and corridor generation, special-room selection
and the enemy/item placement planner behind :class:`DungeonMap`.
"""
from .factory import DungeonFactory
from .geometry import Position, Room
from .map import DungeonMap
from .policy import FloorPolicy, FloorType
from .tiles import Tile, TileType

__all__ = [
    "DungeonFactory",
    "DungeonMap",
    "FloorPolicy",
    "FloorType",
    "Position",
    "Room",
    "Tile",
    "TileType",
]
