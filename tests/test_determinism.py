"""Test that combat produces the same, known outcomes for reference maps."""
import pytest
from engine.engine import CombatEngine
from engine.model import Faction
from engine.parser import parse_battlefield
from engine.search import simulate

COMBAT_SAMPLE = """
#######
#.G...#
#...EG#
#.#.#G#
#..G#E#
#.....#
#######
"""

MOVEMENT_SAMPLE = """
#########
#G..G..G#
#.......#
#.......#
#G..E..G#
#.......#
#.......#
#G..G..G#
#########
"""

REFERENCE_MAPS = [
    ("#######\n#G..#E#\n#E#E.E#\n#G.##.#\n#...#E#\n#...E.#\n#######", 37, Faction.ELF, 982),
    ("#######\n#E..EG#\n#.#G.E#\n#E.##E#\n#G..#.#\n#..E#.#\n#######", 46, Faction.ELF, 859),
    ("#######\n#E.G#.#\n#.#G..#\n#G.#.G#\n#G..#.#\n#...E.#\n#######", 35, Faction.GOBLIN, 793),
    ("#######\n#.E...#\n#.#..G#\n#.###.#\n#E#G#G#\n#...#G#\n#######", 54, Faction.GOBLIN, 536),
    ("#########\n#G......#\n#.E.#...#\n#..##..G#\n#...##..#\n#...#...#\n#.G...G.#\n#.....G.#\n#########",
     20, Faction.GOBLIN, 937),
]


def test_combat_sample_outcome():
    outcome = simulate(parse_battlefield(COMBAT_SAMPLE))
    assert outcome.rounds_completed == 47
    assert outcome.winner is Faction.GOBLIN
    assert outcome.remaining_hp == 590
    assert outcome.score == 27730
    assert outcome.survivors == {Faction.ELF: 0, Faction.GOBLIN: 4}
    assert not outcome.halted


def test_movement_sample_outcome():
    outcome = simulate(parse_battlefield(MOVEMENT_SAMPLE))
    assert (outcome.rounds_completed, outcome.winner, outcome.remaining_hp) == (18, Faction.GOBLIN, 1546)


@pytest.mark.parametrize("text,rounds,winner,hp", REFERENCE_MAPS)
def test_reference_maps(text, rounds, winner, hp):
    outcome = simulate(parse_battlefield(text))
    assert outcome.rounds_completed == rounds
    assert outcome.winner is winner
    assert outcome.remaining_hp == hp


def test_engine_determinism():
    """Same map and attack powers should produce identical results."""
    battlefield = parse_battlefield(COMBAT_SAMPLE)

    eng1 = CombatEngine(battlefield.grid, battlefield.spawn_registry())
    eng2 = CombatEngine(battlefield.grid, battlefield.spawn_registry())
    out1 = eng1.run()
    out2 = eng2.run()

    assert out1 == out2
    assert len(eng1.events) == len(eng2.events)
    for e1, e2 in zip(eng1.events, eng2.events):
        assert e1.kind == e2.kind
        assert e1.round == e2.round
        assert e1.data == e2.data


def test_battlefield_template_is_not_mutated():
    battlefield = parse_battlefield(COMBAT_SAMPLE)
    before = [(u.id, u.position, u.hit_points) for u in battlefield.units]
    simulate(battlefield)
    assert [(u.id, u.position, u.hit_points) for u in battlefield.units] == before


def test_small_arena_has_single_survivor():
    battlefield = parse_battlefield("E..\n...\n..G")
    outcome = simulate(battlefield)
    # The elf reaches striking distance first and always hits first.
    assert outcome.winner is Faction.ELF
    assert outcome.survivors == {Faction.ELF: 1, Faction.GOBLIN: 0}
    assert outcome.rounds_completed == 68
    assert outcome.remaining_hp == 2
    assert simulate(battlefield) == outcome


def test_hit_points_never_negative():
    battlefield = parse_battlefield(COMBAT_SAMPLE)
    eng = CombatEngine(battlefield.grid, battlefield.spawn_registry())
    eng.run()
    attacks = [e for e in eng.events if e.kind == "UnitAttacked"]
    assert attacks
    assert all(e.data["hp"] >= 0 for e in attacks)
    assert all(u.hit_points > 0 for u in eng.snapshot())


def test_each_unit_acts_once_per_round():
    battlefield = parse_battlefield(REFERENCE_MAPS[0][0])
    eng = CombatEngine(battlefield.grid, battlefield.spawn_registry())
    eng.run()
    seen = set()
    for e in eng.events:
        if e.kind == "UnitMoved":
            key = ("move", e.round, e.data["unit_id"])
        elif e.kind == "UnitAttacked":
            key = ("attack", e.round, e.data["attacker"])
        else:
            continue
        assert key not in seen
        seen.add(key)
