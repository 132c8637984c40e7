from typing import Dict, Iterable, List, Optional

import numpy as np

from .errors import UnitNotFoundError
from .grid import GridMap
from .model import Faction, Point, Unit


class UnitRegistry:
    """Mutable set of units for one simulation, keyed by unit id."""

    def __init__(self, units: Iterable[Unit] = ()):
        self._units: Dict[int, Unit] = {}
        for u in units:
            if u.id in self._units:
                raise ValueError(f"Duplicate unit id {u.id}")
            self._units[u.id] = u

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self):
        return iter(self._units.values())

    def unit_at(self, p: Point) -> Optional[Unit]:
        """Return the living unit standing on p, if any."""
        for u in self._units.values():
            if u.alive and u.position == p:
                return u
        return None

    def get(self, unit_id: int) -> Optional[Unit]:
        return self._units.get(unit_id)

    def get_mut(self, unit_id: int) -> Unit:
        u = self._units.get(unit_id)
        if u is None:
            raise UnitNotFoundError(unit_id)
        return u

    def living_units(self) -> List[Unit]:
        """Living units sorted by reading order of their positions."""
        return sorted((u for u in self._units.values() if u.alive), key=lambda u: u.position)

    def living_units_by_faction(self, faction: Faction) -> List[Unit]:
        return [u for u in self.living_units() if u.faction is faction]

    def count(self, faction: Faction) -> int:
        return sum(1 for u in self._units.values() if u.alive and u.faction is faction)

    def total_hp(self, faction: Optional[Faction] = None) -> int:
        return sum(u.hit_points for u in self._units.values()
                   if u.alive and (faction is None or u.faction is faction))

    def remove_dead(self) -> List[Unit]:
        """Purge units whose hit points reached zero and return them."""
        dead = [u for u in self._units.values() if not u.alive]
        for u in dead:
            del self._units[u.id]
        return dead

    def occupancy(self, grid: GridMap) -> np.ndarray:
        """Walls plus every living unit's square."""
        blocked = grid.walls.copy()
        for u in self._units.values():
            if u.alive:
                blocked[u.position.y, u.position.x] = True
        return blocked
