from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .errors import InvariantViolation
from .grid import GridMap
from .model import Event, Point, Unit
from .pathfinding import UNREACHABLE, distance_map
from .units import UnitRegistry


class TurnEngine:
    """Plays a single unit's turn against the live registry."""

    def __init__(self, grid: GridMap, registry: UnitRegistry):
        self.grid = grid
        self.registry = registry

    def take_turn(self, unit: Unit, round_no: int) -> Tuple[bool, List[Event]]:
        """Move and/or attack with unit.

        Returns (combat_over, events). combat_over is True when the unit finds
        no living enemy anywhere, in which case nothing else happens.
        """
        evts: List[Event] = []
        if not unit.alive:
            return False, evts
        if not self.registry.living_units_by_faction(unit.faction.enemy):
            return True, evts

        if not self._adjacent_enemies(unit):
            step = self.choose_step(unit)
            if step is not None:
                evts.append(Event("UnitMoved", round_no,
                                  {"unit_id": unit.id, "from": _xy(unit.position), "to": _xy(step)}))
                logger.debug(f"Unit {unit.id} ({unit.faction.value}) moves {unit.position} -> {step}")
                unit.position = step

        enemies = self._adjacent_enemies(unit)
        if enemies:
            evts += self._attack(unit, enemies, round_no)
        return False, evts

    def _adjacent_enemies(self, unit: Unit) -> List[Unit]:
        enemies = []
        for p in self.grid.neighbors4(unit.position):
            other = self.registry.unit_at(p)
            if other is not None and other.faction is not unit.faction:
                enemies.append(other)
        return enemies

    def in_range_squares(self, unit: Unit, blocked: np.ndarray) -> List[Point]:
        """Open squares next to any living enemy of unit."""
        squares = set()
        for enemy in self.registry.living_units_by_faction(unit.faction.enemy):
            for p in self.grid.neighbors4(enemy.position):
                if not blocked[p.y, p.x]:
                    squares.add(p)
        return sorted(squares)

    def choose_step(self, unit: Unit) -> Optional[Point]:
        """The square unit steps onto this turn, or None if it stays put."""
        blocked = self.registry.occupancy(self.grid)
        squares = self.in_range_squares(unit, blocked)
        if not squares:
            return None

        from_unit = distance_map(unit.position, blocked)
        reachable = [(int(from_unit[p.y, p.x]), p) for p in squares
                     if from_unit[p.y, p.x] != UNREACHABLE]
        if not reachable:
            return None
        distance, target = min(reachable)

        # Distances back from the chosen square; the unit's own square stays blocked.
        from_target = distance_map(target, blocked)
        for p in self.grid.neighbors4(unit.position):
            if not blocked[p.y, p.x] and from_target[p.y, p.x] == distance - 1:
                return p
        raise InvariantViolation(
            f"Unit {unit.id} at {unit.position} has no first step toward {target}")

    def _attack(self, unit: Unit, enemies: List[Unit], round_no: int) -> List[Event]:
        evts: List[Event] = []
        target = min(enemies, key=lambda e: (e.hit_points, e.position))
        unit.target_id = target.id
        target.hit_points = max(0, target.hit_points - unit.attack_power)
        evts.append(Event("UnitAttacked", round_no,
                          {"attacker": unit.id, "target": target.id, "hp": target.hit_points}))
        if not target.alive:
            logger.debug(f"Unit {target.id} ({target.faction.value}) killed by unit {unit.id}")
            evts.append(Event("UnitKilled", round_no,
                              {"unit_id": target.id, "faction": target.faction.value,
                               "pos": _xy(target.position)}))
        return evts


def _xy(p: Point) -> List[int]:
    return [p.x, p.y]
