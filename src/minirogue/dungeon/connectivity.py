from __future__ import annotations

import logging
from typing import List, Sequence

from .corridors import CorridorCarver
from .geometry import Position, Room
from .grid import GridBuilder

logger = logging.getLogger(__name__)


def unreachable_rooms(builder: GridBuilder, rooms: Sequence[Room], start: Position) -> List[Room]:
    reachable = builder.bfs_reachable(start)
    return [room for room in rooms if room.center() not in reachable]


def ensure_connected(builder: GridBuilder, rooms: Sequence[Room], start: Position, carver: CorridorCarver) -> int:
    """Flood fill from ``start`` and link every unreachable room to the nearest
    reachable one. Returns the number of repair corridors carved.

    Chained L corridors already join every room to its predecessor, so on a
    generated floor this finds nothing to do. It only carves when rooms were
    joined some other way.

    Each pass either reconnects at least one room or stops, so the loop runs at
    most ``len(rooms)`` times.
    """
    repairs = 0
    for _ in range(len(rooms)):
        missing = unreachable_rooms(builder, rooms, start)
        if not missing:
            break
        reachable = [room for room in rooms if room not in missing]
        if not reachable:
            logger.warning("No reachable room from start %s; skipping connectivity repair", start)
            break
        room = missing[0]
        target = min(reachable, key=lambda r: r.center().distance_to(room.center()))
        carver.connect(target, room)
        repairs += 1
        logger.debug(
            "Room at (%d,%d) was unreachable; carved repair corridor to (%d,%d)",
            room.x,
            room.y,
            target.x,
            target.y,
        )
    return repairs
