from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

START_HIT_POINTS = 200
BASE_ATTACK_POWER = 3


@dataclass(frozen=True, order=True)
class Point:
    """Grid coordinate. Ordering is reading order: row first, then column."""
    y: int
    x: int

    def __repr__(self) -> str:
        return f"Point(y={self.y}, x={self.x})"


class Faction(Enum):
    """Combatant side, keyed by its map character"""
    ELF = "E"
    GOBLIN = "G"

    @property
    def enemy(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF

    @property
    def plural_name(self) -> str:
        return "Elves" if self is Faction.ELF else "Goblins"


@dataclass
class Unit:
    id: int
    faction: Faction
    position: Point
    hit_points: int = START_HIT_POINTS
    attack_power: int = BASE_ATTACK_POWER
    target_id: Optional[int] = None  # last unit attacked, resolved through the registry

    @property
    def alive(self) -> bool:
        return self.hit_points > 0


@dataclass
class Event:
    kind: str
    round: int
    data: Dict


@dataclass
class Outcome:
    rounds_completed: int
    winner: Optional[Faction]
    remaining_hp: int
    survivors: Dict[Faction, int] = field(default_factory=dict)
    halted: bool = False

    @property
    def score(self) -> int:
        return self.rounds_completed * self.remaining_hp
