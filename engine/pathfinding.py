"""Breadth-first search over the open squares of a battlefield.

Movement costs one per step, so plain BFS yields shortest distances.
``blocked`` is a (height, width) boolean array: walls plus living units.
"""

from collections import deque
from typing import List, Optional

import numpy as np

from .model import Point

UNREACHABLE = -1

_OFFSETS = ((-1, 0), (0, -1), (0, 1), (1, 0))


def distance_map(start: Point, blocked: np.ndarray) -> np.ndarray:
    """Step counts from start to every square; UNREACHABLE where no path exists.

    The start square is expanded even when it is itself blocked, which is the
    normal case: the moving unit occupies it.
    """
    height, width = blocked.shape
    walls = blocked.tolist()
    dist = [[UNREACHABLE] * width for _ in range(height)]
    dist[start.y][start.x] = 0
    queue = deque([(start.y, start.x)])
    while queue:
        y, x = queue.popleft()
        d = dist[y][x] + 1
        for dy, dx in _OFFSETS:
            ny, nx = y + dy, x + dx
            if not (0 <= ny < height and 0 <= nx < width):
                continue
            if walls[ny][nx] or dist[ny][nx] != UNREACHABLE:
                continue
            dist[ny][nx] = d
            queue.append((ny, nx))
    return np.array(dist, dtype=np.int32)


def shortest_path(start: Point, goal: Point, blocked: np.ndarray) -> Optional[List[Point]]:
    """A minimal-length path from start to goal, excluding start.

    Returns None when the goal is blocked or cannot be reached. A goal equal to
    start gives an empty path.
    """
    if goal == start:
        return []
    height, width = blocked.shape
    if not (0 <= goal.y < height and 0 <= goal.x < width) or blocked[goal.y, goal.x]:
        return None

    walls = blocked.tolist()
    came_from = {(start.y, start.x): None}
    queue = deque([(start.y, start.x)])
    target = (goal.y, goal.x)
    while queue:
        current = queue.popleft()
        if current == target:
            break
        y, x = current
        for dy, dx in _OFFSETS:
            nxt = (y + dy, x + dx)
            if not (0 <= nxt[0] < height and 0 <= nxt[1] < width):
                continue
            if walls[nxt[0]][nxt[1]] or nxt in came_from:
                continue
            came_from[nxt] = current
            queue.append(nxt)

    if target not in came_from:
        return None
    path = []
    node = target
    while node != (start.y, start.x):
        path.append(Point(*node))
        node = came_from[node]
    path.reverse()
    return path
