from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.combat.resolver import AttackResult
from battlefleet.game.core.errors import ErrorCode, ValidationError
from battlefleet.game.core.models import AttackOutcome, Coord, Orientation


def test_hits_and_sinkings_are_tracked(record_shot) -> None:
    memory = AIMemory()
    record_shot(memory, Coord(3, 3), AttackOutcome.HIT, "d1")
    assert memory.active_hits() == [Coord(3, 3)]
    assert memory.confirmed_ships["d1"].positions == [Coord(3, 3)]

    record_shot(memory, Coord(3, 4), AttackOutcome.SUNK, "d1", sunk_size=2, turn=3)
    assert memory.active_hits() == []
    assert memory.confirmed_ships == {}
    sunk = memory.sunken_ships[0]
    assert sunk.positions == (Coord(3, 3), Coord(3, 4))
    assert sunk.sunk_turn == 3
    assert memory.remaining_sizes() == [5, 4, 3, 3]


def test_hit_on_an_already_sunk_ship_is_not_confirmed_again(record_shot) -> None:
    memory = AIMemory()
    record_shot(memory, Coord(3, 3), AttackOutcome.SUNK, "d1", sunk_size=2, turn=1)
    record_shot(memory, Coord(3, 4), AttackOutcome.HIT, "d1", turn=3)
    assert memory.confirmed_ships == {}
    assert memory.active_hits() == []
    assert Coord(3, 4) in memory.shots_fired


def test_confirmed_ship_orientation_from_two_hits(record_shot) -> None:
    memory = AIMemory()
    record_shot(memory, Coord(1, 1), AttackOutcome.HIT, "c1")
    assert memory.confirmed_ships["c1"].orientation is None
    record_shot(memory, Coord(2, 1), AttackOutcome.HIT, "c1")
    assert memory.confirmed_ships["c1"].orientation is Orientation.HORIZONTAL


def test_rejected_and_repeated_results_are_ignored(record_shot) -> None:
    memory = AIMemory()
    rejected = AttackResult.rejected(Coord(0, 0), (ValidationError(ErrorCode.NOT_YOUR_TURN, "wait"),))
    memory.record_attack(rejected, 1)
    assert memory.shots_fired == set()

    record_shot(memory, Coord(0, 0))
    record_shot(memory, Coord(0, 0))
    assert memory.misses == [Coord(0, 0)]


def test_area_results_record_every_cell() -> None:
    memory = AIMemory()
    chain = [
        AttackResult(Coord(0, 0), AttackOutcome.MISS),
        AttackResult(Coord(1, 0), AttackOutcome.HIT, ship_id="s1", damage_dealt=1),
    ]
    memory.record_attack(AttackResult(Coord(0, 0), AttackOutcome.HIT, chain_reaction=chain), 2)
    assert memory.shots_fired == {Coord(0, 0), Coord(1, 0)}
    assert memory.active_hits() == [Coord(1, 0)]


def test_snapshot_is_detached_and_reset_clears(record_shot) -> None:
    memory = AIMemory()
    record_shot(memory, Coord(4, 4), AttackOutcome.HIT, "s1")
    snapshot = memory.snapshot()
    memory.reset()
    assert snapshot.shots_fired == frozenset({Coord(4, 4)})
    assert snapshot.confirmed_ships == (("s1", (Coord(4, 4),)),)
    assert memory.shots_fired == set()
    assert memory.hits == []
