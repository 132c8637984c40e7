"""Minimal attack power at which one faction wins without losing a unit.

The predicate "wins with zero losses at power v" only improves as v grows,
so the search doubles a trial value until the predicate holds and then
bisects between the last failing and the first succeeding value. Every
probe is a full, independent simulation on a freshly spawned registry.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger

from .engine import CombatEngine
from .errors import SearchBoundExceeded
from .model import Faction, Outcome
from .parser import Battlefield

DEFAULT_POWER_CEILING = 1024


@dataclass
class SearchResult:
    power: int
    outcome: Outcome
    evaluations: List[Tuple[int, bool]] = field(default_factory=list)


def simulate(battlefield: Battlefield, faction: Optional[Faction] = None, power: Optional[int] = None,
             max_rounds: Optional[int] = None, halt_on_loss: bool = False) -> Outcome:
    """Run one full combat, optionally with faction's attack power replaced."""
    overrides = {faction: power} if faction is not None and power is not None else None
    engine = CombatEngine(battlefield.grid, battlefield.spawn_registry(overrides), max_rounds=max_rounds)
    return engine.run(halt_on_loss=faction if halt_on_loss else None)


def wins_without_loss(battlefield: Battlefield, faction: Faction, power: int,
                      max_rounds: Optional[int] = None) -> bool:
    outcome = simulate(battlefield, faction, power, max_rounds=max_rounds, halt_on_loss=True)
    return (not outcome.halted and outcome.winner is faction
            and outcome.survivors.get(faction, 0) == battlefield.count(faction))


def find_minimal_attack_power(battlefield: Battlefield, faction: Faction = Faction.ELF,
                              ceiling: int = DEFAULT_POWER_CEILING,
                              max_rounds: Optional[int] = None) -> SearchResult:
    evaluations: List[Tuple[int, bool]] = []

    def probe(power: int) -> bool:
        ok = wins_without_loss(battlefield, faction, power, max_rounds=max_rounds)
        evaluations.append((power, ok))
        logger.debug(f"{faction.plural_name} at attack power {power}: {'no-loss win' if ok else 'fail'}")
        return ok

    if probe(0):
        lo, hi = 0, 0
    else:
        lo, hi = 0, 1
        while not probe(hi):
            if hi >= ceiling:
                raise SearchBoundExceeded(ceiling)
            lo = hi
            hi = min(hi * 2, ceiling)

    # Invariant: lo fails, hi succeeds.
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if probe(mid):
            hi = mid
        else:
            lo = mid

    outcome = simulate(battlefield, faction, hi, max_rounds=max_rounds)
    logger.info(f"{faction.plural_name} need attack power {hi} "
                f"({len(evaluations)} probes, score {outcome.score})")
    return SearchResult(power=hi, outcome=outcome, evaluations=evaluations)
