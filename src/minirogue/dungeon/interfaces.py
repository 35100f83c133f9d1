from __future__ import annotations

from typing import Protocol


class PlaceableEnemy(Protocol):
    """Anything the map can move onto a tile.

    The map only repositions enemies; it never creates or owns them.
    Coordinates are pixels, i.e. tile coordinates scaled by the tile size.
    """

    def move_to(self, x: float, y: float) -> None:
        """Move the enemy's top-left corner to the given pixel position."""
