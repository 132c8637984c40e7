from typing import Tuple

import numpy as np

from .model import Point

# Up, left, right, down: neighbors come out in reading order.
_OFFSETS = ((-1, 0), (0, -1), (0, 1), (1, 0))


class GridMap:
    """Immutable walls and bounds of a battlefield."""

    def __init__(self, walls: np.ndarray):
        self._walls = np.array(walls, dtype=bool)
        self._walls.setflags(write=False)
        self.height, self.width = self._walls.shape

    @property
    def walls(self) -> np.ndarray:
        """Read-only (height, width) boolean wall array."""
        return self._walls

    def in_bounds(self, p: Point) -> bool:
        return 0 <= p.y < self.height and 0 <= p.x < self.width

    def is_wall(self, p: Point) -> bool:
        """Out-of-bounds squares count as walls."""
        if not self.in_bounds(p):
            return True
        return bool(self._walls[p.y, p.x])

    def neighbors4(self, p: Point) -> Tuple[Point, ...]:
        """In-bounds orthogonal neighbors of p, in reading order."""
        result = []
        for dy, dx in _OFFSETS:
            ny, nx = p.y + dy, p.x + dx
            if 0 <= ny < self.height and 0 <= nx < self.width:
                result.append(Point(ny, nx))
        return tuple(result)
