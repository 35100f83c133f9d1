from __future__ import annotations

import logging
import random
from typing import Sequence

from .geometry import Position, Room
from .grid import GridBuilder

logger = logging.getLogger(__name__)


class CorridorCarver:
    """Chains rooms together in generation order with L-shaped corridors.

    Room ``i`` is joined to room ``i - 1``. A coin flip picks whether the
    horizontal or the vertical leg comes first. Corridors are ``width`` tiles
    wide, extending right of vertical legs and below horizontal legs.
    """

    def __init__(self, builder: GridBuilder, width: int, rng: random.Random) -> None:
        if width < 1:
            raise ValueError("Corridor width must be >= 1")
        self.builder = builder
        self.width = width
        self.rng = rng

    def connect_all(self, rooms: Sequence[Room]) -> int:
        for i in range(1, len(rooms)):
            self.connect(rooms[i - 1], rooms[i])
        logger.debug("Carved %d corridors (width=%d)", max(0, len(rooms) - 1), self.width)
        return max(0, len(rooms) - 1)

    def connect(self, a: Room, b: Room) -> None:
        self.connect_points(a.center(), b.center())

    def connect_points(self, pa: Position, pb: Position) -> None:
        if self.rng.random() < 0.5:
            # horizontal then vertical
            self.builder.carve_h_corridor(pa.x, pb.x, pa.y, self.width)
            self.builder.carve_v_corridor(pa.y, pb.y, pb.x, self.width)
        else:
            # vertical then horizontal
            self.builder.carve_v_corridor(pa.y, pb.y, pa.x, self.width)
            self.builder.carve_h_corridor(pa.x, pb.x, pb.y, self.width)
