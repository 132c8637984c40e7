import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from engine.engine import CombatEngine
from engine.errors import MapParseError
from engine.model import Faction, Outcome, Unit
from engine.parser import Battlefield, parse_battlefield
from engine.search import SearchResult, find_minimal_attack_power
from .eventlog import EventLog


@dataclass
class BattleRecord:
    battle_id: str
    outcome: Outcome
    units: List[Unit]
    events: EventLog = field(default_factory=EventLog)


class BattleRunner:
    """Async driver that runs simulations in worker threads and keeps their results."""

    def __init__(self, hit_points: int, attack_power: int, max_rounds: Optional[int] = None,
                 power_ceiling: int = 1024):
        self.hit_points = hit_points
        self.attack_power = attack_power
        self.max_rounds = max_rounds
        self.power_ceiling = power_ceiling
        self._battles: Dict[str, BattleRecord] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def parse(self, text: str) -> Battlefield:
        battlefield = parse_battlefield(text, hit_points=self.hit_points, attack_power=self.attack_power)
        if not battlefield.units:
            raise MapParseError("Map has no units")
        return battlefield

    def _simulate(self, battlefield: Battlefield, attack_power: Dict[Faction, int]) -> CombatEngine:
        eng = CombatEngine(battlefield.grid, battlefield.spawn_registry(attack_power),
                           max_rounds=self.max_rounds)
        eng.run()
        return eng

    async def run_battle(self, text: str, attack_power: Optional[Dict[Faction, int]] = None) -> BattleRecord:
        """Parse and simulate a map to completion, then store the result."""
        battlefield = self.parse(text)
        eng = await asyncio.to_thread(self._simulate, battlefield, attack_power or {})
        async with self._lock:
            battle_id = f"battle-{next(self._ids)}"
            record = BattleRecord(battle_id=battle_id, outcome=eng.outcome, units=eng.snapshot())
            record.events.append_many(eng.events)
            self._battles[battle_id] = record
        logger.info(f"[BattleRunner] {battle_id}: {len(eng.events)} events, score {eng.outcome.score}")
        return record

    async def search(self, text: str, faction: Faction) -> SearchResult:
        battlefield = self.parse(text)
        return await asyncio.to_thread(find_minimal_attack_power, battlefield, faction,
                                       self.power_ceiling, self.max_rounds)

    async def get(self, battle_id: str) -> Optional[BattleRecord]:
        async with self._lock:
            return self._battles.get(battle_id)
