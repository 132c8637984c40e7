from fastapi import FastAPI, HTTPException
from loguru import logger
from engine.errors import CombatStalledError, MapParseError, SearchBoundExceeded
from engine.model import Outcome
from runtime.runner import BattleRunner
from .config import settings
from .schemas import (BattleRequest, BattleResponse, EventsResponse, OutcomeOut,
                      SearchRequest, SearchResponse, UnitOut)

app = FastAPI(title=settings.app_name)
runner = BattleRunner(
    hit_points=settings.start_hit_points,
    attack_power=settings.base_attack_power,
    max_rounds=settings.max_rounds,
    power_ceiling=settings.search_power_ceiling,
)

def _outcome_out(o: Outcome) -> OutcomeOut:
    return OutcomeOut(
        rounds_completed=o.rounds_completed,
        winner=o.winner,
        remaining_hp=o.remaining_hp,
        score=o.score,
        survivors=o.survivors,
    )

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": settings.app_name,
        "docs": "/docs",
        "version": settings.app_version
    }

@app.post("/battles", response_model=BattleResponse)
async def start_battle(req: BattleRequest):
    """Simulate a map to completion."""
    try:
        record = await runner.run_battle(req.map, req.attack_power)
    except MapParseError as e:
        raise HTTPException(422, str(e))
    except CombatStalledError as e:
        logger.warning(f"[API] {e}")
        raise HTTPException(409, str(e))
    return BattleResponse(battle_id=record.battle_id, **_outcome_out(record.outcome).model_dump())

@app.get("/battles/{battle_id}/state")
async def get_state(battle_id: str):
    """Get the surviving units of a finished battle."""
    record = await runner.get(battle_id)
    if not record:
        raise HTTPException(404, f"Unknown battle {battle_id}")
    return {
        "battle_id": record.battle_id,
        "rounds_completed": record.outcome.rounds_completed,
        "units": [
            UnitOut(id=u.id, faction=u.faction, pos=(u.position.x, u.position.y),
                    hit_points=u.hit_points, attack_power=u.attack_power, target_id=u.target_id)
            for u in record.units
        ],
    }

@app.get("/battles/{battle_id}/events")
async def get_events(battle_id: str, since: int = 0, limit: int = settings.event_page_limit,
                     from_round: int = 0):
    """Get events since offset, optionally starting at a given round."""
    record = await runner.get(battle_id)
    if not record:
        raise HTTPException(404, f"Unknown battle {battle_id}")
    evts, next_offset = record.events.page(since, limit, from_round=from_round)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "round": e.round, "data": e.data} for e in evts]
    )

@app.post("/search", response_model=SearchResponse)
async def search_power(req: SearchRequest):
    """Find the smallest attack power giving req.faction a win without losses."""
    try:
        result = await runner.search(req.map, req.faction)
    except MapParseError as e:
        raise HTTPException(422, str(e))
    except (CombatStalledError, SearchBoundExceeded) as e:
        logger.warning(f"[API] {e}")
        raise HTTPException(409, str(e))
    return SearchResponse(
        faction=req.faction,
        power=result.power,
        outcome=_outcome_out(result.outcome),
        evaluations=result.evaluations,
    )
