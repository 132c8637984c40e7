import copy
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .errors import MapParseError
from .grid import GridMap
from .model import BASE_ATTACK_POWER, START_HIT_POINTS, Faction, Point, Unit
from .units import UnitRegistry

WALL = "#"
FLOOR = "."


@dataclass
class Battlefield:
    """A parsed map: immutable grid plus the template of starting units."""
    grid: GridMap
    units: List[Unit]

    def spawn_registry(self, attack_power: Optional[Dict[Faction, int]] = None) -> UnitRegistry:
        """Fresh registry for one simulation, with optional per-faction attack power."""
        units = copy.deepcopy(self.units)
        for u in units:
            if attack_power and u.faction in attack_power:
                u.attack_power = attack_power[u.faction]
        return UnitRegistry(units)

    def count(self, faction: Faction) -> int:
        return sum(1 for u in self.units if u.faction is faction)


def parse_battlefield(text: str, hit_points: int = START_HIT_POINTS,
                      attack_power: int = BASE_ATTACK_POWER) -> Battlefield:
    """Build a Battlefield from map text.

    '#' is a wall, '.' open floor, 'E' and 'G' a unit standing on open floor.
    Unit ids follow reading order of the starting positions. Rows shorter than
    the longest one are padded with walls.
    """
    lines = [line.rstrip() for line in text.rstrip().lstrip("\r\n").split("\n")]
    if not lines or not any(lines):
        raise MapParseError("Map is empty")

    height = len(lines)
    width = max(len(line) for line in lines)
    walls = np.ones((height, width), dtype=bool)
    units: List[Unit] = []
    for y, line in enumerate(lines):
        for x, c in enumerate(line):
            if c == WALL:
                continue
            if c == FLOOR:
                walls[y, x] = False
                continue
            try:
                faction = Faction(c)
            except ValueError:
                raise MapParseError(f"Invalid map character {c!r} at row {y}, column {x}",
                                    row=y, column=x) from None
            walls[y, x] = False
            units.append(Unit(id=len(units), faction=faction, position=Point(y, x),
                              hit_points=hit_points, attack_power=attack_power))
    return Battlefield(grid=GridMap(walls), units=units)
