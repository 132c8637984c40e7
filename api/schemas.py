from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, NonNegativeInt
from engine.model import Faction

class BattleRequest(BaseModel):
    """Battle request schema."""
    map: str = Field(min_length=1)
    attack_power: Dict[Faction, NonNegativeInt] = Field(default_factory=dict)  # per-faction override

class SearchRequest(BaseModel):
    """Attack power search request schema."""
    map: str = Field(min_length=1)
    faction: Faction = Faction.ELF

class OutcomeOut(BaseModel):
    rounds_completed: int
    winner: Optional[Faction]
    remaining_hp: int
    score: int
    survivors: Dict[Faction, int]

class BattleResponse(OutcomeOut):
    battle_id: str

class UnitOut(BaseModel):
    id: int
    faction: Faction
    pos: Tuple[int, int]  # (x, y)
    hit_points: int
    attack_power: int
    target_id: Optional[int] = None

class SearchResponse(BaseModel):
    faction: Faction
    power: int
    outcome: OutcomeOut
    evaluations: List[Tuple[int, bool]]

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    events: list[dict]
