from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Position:
    """Immutable integer grid coordinate. (0, 0) is the top-left corner."""

    x: int
    y: int

    def move(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def distance_to(self, other: "Position") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def manhattan_distance_to(self, other: "Position") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_adjacent_to(self, other: "Position") -> bool:
        """True for the 8 surrounding cells; a position is not adjacent to itself."""
        dx = abs(self.x - other.x)
        dy = abs(self.y - other.y)
        return dx <= 1 and dy <= 1 and (dx, dy) != (0, 0)

    def neighbors4(self) -> Iterator["Position"]:
        # Ordered for deterministic traversal
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            yield Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Room:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def center(self) -> Position:
        return Position(self.x + self.width // 2, self.y + self.height // 2)

    def contains_position(self, position: Position) -> bool:
        return (self.x <= position.x < self.right) and (self.y <= position.y < self.bottom)

    def intersects(self, other: "Room", buffer: int = 1) -> bool:
        """Rectangle overlap test with ``buffer`` tiles of required spacing."""
        return (
            self.x < other.right + buffer
            and self.right + buffer > other.x
            and self.y < other.bottom + buffer
            and self.bottom + buffer > other.y
        )

    def positions(self) -> Iterator[Position]:
        for yy in range(self.y, self.bottom):
            for xx in range(self.x, self.right):
                yield Position(xx, yy)
