"""Tests for the minimal attack power search and the engine's stop conditions."""
import pytest
from engine.engine import CombatEngine
from engine.errors import CombatStalledError, InvariantViolation, SearchBoundExceeded
from engine.model import Faction
from engine.parser import parse_battlefield
from engine.search import find_minimal_attack_power, simulate, wins_without_loss
from engine.units import UnitRegistry

COMBAT_SAMPLE = "#######\n#.G...#\n#...EG#\n#.#.#G#\n#..G#E#\n#.....#\n#######"
SECOND_SAMPLE = "#######\n#E..EG#\n#.#G.E#\n#E.##E#\n#G..#.#\n#..E#.#\n#######"
WALLED_OFF = "#####\n#E#G#\n#####"


def test_minimal_power_for_combat_sample():
    result = find_minimal_attack_power(parse_battlefield(COMBAT_SAMPLE))
    assert result.power == 15
    assert result.outcome.rounds_completed == 29
    assert result.outcome.winner is Faction.ELF
    assert result.outcome.remaining_hp == 172
    assert result.outcome.score == 4988
    assert result.evaluations == [
        (0, False), (1, False), (2, False), (4, False), (8, False), (16, True),
        (12, False), (14, False), (15, True),
    ]


def test_minimal_power_for_second_sample():
    result = find_minimal_attack_power(parse_battlefield(SECOND_SAMPLE))
    assert result.power == 4
    assert (result.outcome.rounds_completed, result.outcome.remaining_hp) == (33, 948)
    assert result.outcome.survivors[Faction.ELF] == 6


def test_no_loss_win_is_monotonic_above_minimum():
    battlefield = parse_battlefield(COMBAT_SAMPLE)
    assert not wins_without_loss(battlefield, Faction.ELF, 14)
    for power in (15, 16, 25, 50):
        assert wins_without_loss(battlefield, Faction.ELF, power)


def test_halt_on_loss_stops_early():
    battlefield = parse_battlefield(COMBAT_SAMPLE)
    outcome = simulate(battlefield, Faction.ELF, 3, halt_on_loss=True)
    assert outcome.halted
    assert outcome.winner is None
    assert outcome.survivors[Faction.ELF] == 1
    assert outcome.rounds_completed < 47


def test_unopposed_faction_needs_no_power():
    result = find_minimal_attack_power(parse_battlefield("#####\n#E.E#\n#####"))
    assert result.power == 0
    assert result.outcome.rounds_completed == 0
    assert result.evaluations == [(0, True)]


def test_search_gives_up_at_ceiling():
    # No elves at all, so no attack power can give them a win.
    with pytest.raises(SearchBoundExceeded) as exc:
        find_minimal_attack_power(parse_battlefield("#####\n#G.G#\n#####"), ceiling=8)
    assert exc.value.ceiling == 8


def test_search_propagates_stalled_combat():
    with pytest.raises(CombatStalledError):
        find_minimal_attack_power(parse_battlefield(WALLED_OFF), max_rounds=5)


def test_stalled_combat_raises():
    battlefield = parse_battlefield(WALLED_OFF)
    eng = CombatEngine(battlefield.grid, battlefield.spawn_registry(), max_rounds=10)
    with pytest.raises(CombatStalledError):
        eng.run()
    assert eng.rounds_completed == 10


def test_empty_battlefield_is_rejected():
    battlefield = parse_battlefield("...")
    with pytest.raises(InvariantViolation):
        CombatEngine(battlefield.grid, UnitRegistry())
