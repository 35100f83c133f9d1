import random

import pytest

from minirogue.dungeon.geometry import Position, Room
from minirogue.dungeon.grid import GridBuilder, TileGrid
from minirogue.dungeon.tiles import TileType


def test_builder_starts_as_solid_wall():
    b = GridBuilder(6, 4)
    assert all(b.tile_type_at(x, y) is TileType.WALL for y in range(4) for x in range(6))


def test_builder_rejects_tiny_grids():
    with pytest.raises(ValueError):
        GridBuilder(2, 10)


def test_out_of_bounds_lookups_return_none():
    b = GridBuilder(5, 5)
    assert b.get_tile(-1, 0) is None
    assert b.get_tile(0, 5) is None
    assert b.get_tile(10**9, -(10**9)) is None
    assert not b.is_walkable(-1, -1)
    assert b.set_tile(5, 0, TileType.FLOOR) is False


def test_corridors_are_clipped_and_offset():
    b = GridBuilder(10, 6)
    b.carve_h_corridor(8, 2, 4, width=3)  # rows 4, 5 and (clipped) 6
    assert all(b.tile_type_at(x, 4) is TileType.FLOOR for x in range(2, 9))
    assert all(b.tile_type_at(x, 5) is TileType.FLOOR for x in range(2, 9))
    assert b.tile_type_at(1, 4) is TileType.WALL

    b.carve_v_corridor(0, 2, 0, width=2)
    assert all(b.tile_type_at(x, y) is TileType.FLOOR for x in (0, 1) for y in range(3))


def test_open_floor_requires_four_floor_neighbours():
    b = GridBuilder(10, 10)
    room = Room(1, 1, 4, 4)
    b.carve_room(room)
    open_cells = set(b.open_floor_in_room(room))
    assert open_cells == {Position(2, 2), Position(3, 2), Position(2, 3), Position(3, 3)}

    b.stamp(Position(2, 2), TileType.STAIRS)
    assert set(b.open_floor_in_room(room)) == {Position(3, 3)}


def test_random_open_floor_none_when_no_candidates():
    b = GridBuilder(10, 10)
    rng = random.Random(0)
    assert b.random_open_floor_in_room(Room(1, 1, 2, 2), rng) is None
    assert b.random_corridor_floor([], rng) is None


def test_corridor_floor_excludes_room_tiles():
    b = GridBuilder(20, 10)
    room = Room(1, 1, 4, 4)
    b.carve_room(room)
    b.carve_h_corridor(4, 15, 2, width=3)
    corridor = b.open_corridor_floor([room])
    assert corridor
    assert all(not room.contains_position(p) for p in corridor)
    assert Position(10, 3) in corridor


def test_bfs_reachable_stops_at_walls():
    b = GridBuilder(12, 6)
    left, right = Room(1, 1, 3, 3), Room(7, 1, 3, 3)
    b.carve_room(left)
    b.carve_room(right)
    reach = b.bfs_reachable(left.center())
    assert right.center() not in reach
    b.carve_h_corridor(2, 8, 2)
    assert right.center() in b.bfs_reachable(left.center())
    assert b.bfs_reachable(Position(0, 0)) == set()


def test_build_only_once_and_snapshot_matches():
    b = GridBuilder(8, 8)
    b.carve_room(Room(1, 1, 3, 3))
    grid = b.build()
    assert isinstance(grid, TileGrid)
    assert grid.snapshot() == b.snapshot()
    with pytest.raises(RuntimeError):
        b.build()


def test_to_str_lines_marks_start():
    b = GridBuilder(5, 3)
    b.carve_room(Room(1, 1, 3, 1))
    lines = b.build().to_str_lines(start=Position(2, 1))
    assert lines == ["#####", "#.@.#", "#####"]


def test_tilegrid_validates_dimensions():
    b = GridBuilder(4, 4)
    cells = [[b.get_tile(x, y) for x in range(4)] for y in range(4)]
    with pytest.raises(ValueError):
        TileGrid(5, 4, cells)


def test_mark_entrance_keeps_items_and_exploration():
    b = GridBuilder(6, 6)
    b.carve_room(Room(1, 1, 4, 4))
    grid = b.build()
    pos = Position(2, 2)
    relic = object()
    grid.get_tile(2, 2).add_item(relic)
    grid.get_tile(2, 2).set_explored()

    assert grid.mark_entrance(pos) is True
    tile = grid.get_tile(2, 2)
    assert tile.tile_type is TileType.ENTRANCE
    assert tile.items == [relic]
    assert tile.explored
    assert grid.mark_entrance(Position(-1, 3)) is False
