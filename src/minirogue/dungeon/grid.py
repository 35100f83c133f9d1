"""
Tile grid construction and queries.

Generation writes through a :class:`GridBuilder`; once every phase has run the
builder hands its cells over to an immutable-layout :class:`TileGrid`. The grid
keeps its dimensions forever and only accepts ENTRANCE stamps afterwards.
"""
from __future__ import annotations

import logging
import random
from collections import deque
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .geometry import Position, Room
from .tiles import Tile, TileType

logger = logging.getLogger(__name__)


def _new_cells(width: int, height: int) -> List[List[Tile]]:
    return [[Tile(TileType.WALL, Position(x, y)) for x in range(width)] for y in range(height)]


class _GridView:
    """Read helpers shared by the builder and the finished grid."""

    width: int
    height: int
    _cells: List[List[Tile]]

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return self._cells[y][x]

    def tile_type_at(self, x: int, y: int) -> Optional[TileType]:
        tile = self.get_tile(x, y)
        return tile.tile_type if tile is not None else None

    # ---- Query -----------------------------------------------------------
    def is_walkable(self, x: int, y: int) -> bool:
        tile = self.get_tile(x, y)
        return tile is not None and tile.is_walkable

    def is_open_floor(self, x: int, y: int) -> bool:
        """FLOOR tile whose four cardinal neighbours are FLOOR as well.

        Keeps planned entities off doorways and corridor mouths.
        """
        if self.tile_type_at(x, y) is not TileType.FLOOR:
            return False
        return all(
            self.tile_type_at(n.x, n.y) is TileType.FLOOR for n in Position(x, y).neighbors4()
        )

    def open_floor_in_room(self, room: Room) -> List[Position]:
        return [p for p in room.positions() if self.is_open_floor(p.x, p.y)]

    def open_corridor_floor(self, rooms: Sequence[Room]) -> List[Position]:
        """Open floor tiles lying outside every room."""
        return [
            Position(x, y)
            for y in range(self.height)
            for x in range(self.width)
            if self.is_open_floor(x, y) and not any(r.contains_position(Position(x, y)) for r in rooms)
        ]

    def random_open_floor_in_room(self, room: Room, rng: random.Random) -> Optional[Position]:
        candidates = self.open_floor_in_room(room)
        if not candidates:
            return None
        return candidates[rng.randrange(len(candidates))]

    def random_corridor_floor(self, rooms: Sequence[Room], rng: random.Random) -> Optional[Position]:
        candidates = self.open_corridor_floor(rooms)
        if not candidates:
            return None
        return candidates[rng.randrange(len(candidates))]

    def positions_of(self, tile_type: TileType) -> List[Position]:
        return [
            self._cells[y][x].position
            for y in range(self.height)
            for x in range(self.width)
            if self._cells[y][x].tile_type is tile_type
        ]

    # ---- Search ----------------------------------------------------------
    def bfs_reachable(self, start: Position) -> Set[Position]:
        """Flood fill over walkable tiles from ``start`` (4-neighbour)."""
        if not self.is_walkable(start.x, start.y):
            return set()
        seen = {start}
        dq = deque([start])
        while dq:
            p = dq.popleft()
            for n in p.neighbors4():
                if n in seen or not self.is_walkable(n.x, n.y):
                    continue
                seen.add(n)
                dq.append(n)
        return seen

    # ---- Export / Compare -----------------------------------------------
    def to_str_lines(self, start: Optional[Position] = None) -> List[str]:
        lines: List[str] = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                if start is not None and start.x == x and start.y == y:
                    row.append("@")
                else:
                    row.append(self._cells[y][x].tile_type.glyph)
            lines.append("".join(row))
        return lines

    def snapshot(self) -> Tuple[Tuple[str, ...], ...]:
        """Deterministic, hashable snapshot of the tile types for equality tests."""
        return tuple(
            tuple(self._cells[y][x].tile_type.value for x in range(self.width)) for y in range(self.height)
        )


class GridBuilder(_GridView):
    """Mutable grid used while a floor is being generated. Starts as solid wall."""

    def __init__(self, width: int, height: int) -> None:
        if width < 3 or height < 3:
            raise ValueError("Grid must be at least 3x3")
        self.width = width
        self.height = height
        self._cells = _new_cells(width, height)
        self._built = False

    def set_tile(self, x: int, y: int, tile_type: TileType) -> bool:
        if not self.in_bounds(x, y):
            return False
        self._cells[y][x] = Tile(tile_type, Position(x, y))
        return True

    def stamp(self, position: Position, tile_type: TileType) -> bool:
        ok = self.set_tile(position.x, position.y, tile_type)
        if ok:
            logger.debug("Stamped %s at (%d,%d)", tile_type.name, position.x, position.y)
        return ok

    # ---- Carving helpers -------------------------------------------------
    def carve_room(self, room: Room) -> None:
        for p in room.positions():
            self.set_tile(p.x, p.y, TileType.FLOOR)

    def carve_h_corridor(self, x1: int, x2: int, y: int, width: int = 1) -> None:
        if x2 < x1:
            x1, x2 = x2, x1
        for xx in range(x1, x2 + 1):
            for offset in range(width):
                self.set_tile(xx, y + offset, TileType.FLOOR)

    def carve_v_corridor(self, y1: int, y2: int, x: int, width: int = 1) -> None:
        if y2 < y1:
            y1, y2 = y2, y1
        for yy in range(y1, y2 + 1):
            for offset in range(width):
                self.set_tile(x + offset, yy, TileType.FLOOR)

    def build(self) -> "TileGrid":
        if self._built:
            raise RuntimeError("GridBuilder.build() may only be called once")
        self._built = True
        return TileGrid(self.width, self.height, self._cells)


class TileGrid(_GridView):
    """Finished tile grid with fixed dimensions."""

    def __init__(self, width: int, height: int, cells: Iterable[List[Tile]]) -> None:
        self.width = width
        self.height = height
        self._cells = [list(row) for row in cells]
        if len(self._cells) != height or any(len(row) != width for row in self._cells):
            raise ValueError("Cell rows do not match grid dimensions")

    def mark_entrance(self, position: Position) -> bool:
        """Stamp ENTRANCE at ``position``. Items and exploration state carry over."""
        old = self.get_tile(position.x, position.y)
        if old is None:
            return False
        tile = Tile(TileType.ENTRANCE, position)
        for item in old.items:
            tile.add_item(item)
        if old.explored:
            tile.set_explored()
        self._cells[position.y][position.x] = tile
        logger.debug("Entrance marked at (%d,%d)", position.x, position.y)
        return True
