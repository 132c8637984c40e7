from dataclasses import replace
from typing import List, Optional

from loguru import logger

from .errors import CombatStalledError, InvariantViolation
from .grid import GridMap
from .model import Event, Faction, Outcome, Unit
from .turn import TurnEngine
from .units import UnitRegistry


class CombatEngine:
    """Pure, deterministic round loop for one simulation."""

    def __init__(self, grid: GridMap, registry: UnitRegistry, max_rounds: Optional[int] = None):
        if not registry.living_units():
            raise InvariantViolation("Battlefield has no living units")
        self.grid = grid
        self.registry = registry
        self.max_rounds = max_rounds
        self.turns = TurnEngine(grid, registry)
        self.rounds_completed = 0
        self.outcome: Optional[Outcome] = None
        self.events: List[Event] = []

    def step_round(self, halt_on_loss: Optional[Faction] = None) -> Optional[Outcome]:
        """Play one full round. Returns the outcome once combat is over.

        Turn order is fixed at round start by reading order of positions and
        is not revised when units move or die during the round.
        """
        if self.outcome is not None:
            return self.outcome
        round_no = self.rounds_completed + 1
        order = [u.id for u in self.registry.living_units()]
        for unit_id in order:
            unit = self.registry.get(unit_id)
            if unit is None:
                continue  # killed earlier this round
            over, evts = self.turns.take_turn(unit, round_no)
            self.events += evts
            if over:
                return self._finish()
            dead = self.registry.remove_dead()
            if halt_on_loss is not None and any(u.faction is halt_on_loss for u in dead):
                return self._finish(halted=True)
        self.rounds_completed += 1
        return None

    def run(self, halt_on_loss: Optional[Faction] = None) -> Outcome:
        """Play rounds until one faction is wiped out.

        With halt_on_loss set, stop as soon as that faction loses a unit.
        """
        while self.outcome is None:
            if self.max_rounds is not None and self.rounds_completed >= self.max_rounds:
                raise CombatStalledError(self.rounds_completed)
            self.step_round(halt_on_loss)
        return self.outcome

    def _finish(self, halted: bool = False) -> Outcome:
        survivors = {f: self.registry.count(f) for f in Faction}
        winner = None
        if not halted:
            alive = [f for f, n in survivors.items() if n > 0]
            winner = alive[0] if len(alive) == 1 else None
        self.outcome = Outcome(
            rounds_completed=self.rounds_completed,
            winner=winner,
            remaining_hp=self.registry.total_hp(),
            survivors=survivors,
            halted=halted,
        )
        if halted:
            self.events.append(Event("CombatHalted", self.rounds_completed + 1,
                                     {"survivors": {f.value: n for f, n in survivors.items()}}))
            logger.debug(f"Combat halted in round {self.rounds_completed + 1}")
        else:
            self.events.append(Event("CombatEnded", self.rounds_completed + 1,
                                     {"winner": winner.value if winner else None,
                                      "rounds_completed": self.rounds_completed,
                                      "remaining_hp": self.outcome.remaining_hp}))
            logger.info(f"{winner.plural_name if winner else 'Nobody'} win after "
                        f"{self.rounds_completed} rounds with {self.outcome.remaining_hp} HP left")
        return self.outcome

    def snapshot(self) -> List[Unit]:
        """Copies of the living units in reading order."""
        return [replace(u) for u in self.registry.living_units()]
