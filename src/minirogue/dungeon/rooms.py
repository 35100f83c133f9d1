from __future__ import annotations

import logging
import random
from typing import List

from ..config import GenerationSettings
from .geometry import Position, Room
from .grid import GridBuilder
from .policy import FloorPolicy, RoomBatch

logger = logging.getLogger(__name__)


class RoomGenerator:
    """Places the spawn room and then non-overlapping rectangular rooms.

    Candidates are rejected when they overlap an existing room (1-tile buffer)
    or when their center lies closer than the policy's safe distance to the
    spawn room center. Rooms are carved as soon as they are accepted. Running
    out of attempts is not an error; the floor keeps whatever was placed.
    """

    def __init__(self, builder: GridBuilder, policy: FloorPolicy, settings: GenerationSettings, rng: random.Random) -> None:
        self.builder = builder
        self.policy = policy
        self.settings = settings
        self.rng = rng
        self.rooms: List[Room] = []

    def create_spawn_room(self) -> Room:
        size = self.settings.spawn_room_size
        inset = self.settings.spawn_room_inset
        spawn = Room(inset, inset, size, size)
        self._commit(spawn)
        return spawn

    @property
    def spawn_center(self) -> Position:
        return self.rooms[0].center()

    def generate(self) -> List[Room]:
        if not self.rooms:
            self.create_spawn_room()
        for batch in self.policy.room_batches:
            self._run_batch(batch)
        return list(self.rooms)

    def _run_batch(self, batch: RoomBatch) -> None:
        attempts = 0
        while len(self.rooms) < batch.target_total and attempts < batch.max_attempts:
            attempts += 1
            candidate = self._random_room(batch.min_size, batch.max_size)
            if self.is_acceptable(candidate):
                self._commit(candidate)
        if len(self.rooms) < batch.target_total:
            logger.debug(
                "Room batch exhausted %d attempts with %d/%d rooms (%s floor)",
                batch.max_attempts,
                len(self.rooms),
                batch.target_total,
                self.policy.floor_type.value,
            )

    def _random_room(self, min_size: int, max_size: int) -> Room:
        w = self.rng.randint(min_size, max_size)
        h = self.rng.randint(min_size, max_size)
        # Keep a wall column/row on the far edges
        x = self.rng.randint(1, max(1, self.builder.width - w - 1))
        y = self.rng.randint(1, max(1, self.builder.height - h - 1))
        return Room(x, y, w, h)

    def is_acceptable(self, candidate: Room) -> bool:
        # _random_room always fits; this guards rooms handed in directly
        if candidate.right >= self.builder.width or candidate.bottom >= self.builder.height:
            return False
        if any(candidate.intersects(other, buffer=1) for other in self.rooms):
            return False
        if self.rooms and candidate.center().distance_to(self.spawn_center) < self.policy.safe_distance:
            return False
        return True

    def _commit(self, room: Room) -> None:
        self.rooms.append(room)
        self.builder.carve_room(room)
        logger.debug("Room %d placed at (%d,%d) %dx%d", len(self.rooms) - 1, room.x, room.y, room.width, room.height)
