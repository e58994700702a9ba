from battlefleet.game.ai.context import AttackAction
from battlefleet.game.ai.hunt_target import HuntTargetStrategy
from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.core.models import AttackOutcome, Coord


def test_targets_neighbours_of_unsunk_hit(make_context, record_shot) -> None:
    memory = AIMemory()
    record_shot(memory, Coord(5, 5), AttackOutcome.HIT, "s1")
    result = HuntTargetStrategy().execute(make_context(memory=memory))
    assert result.action == AttackAction(Coord(4, 5))
    assert result.alternatives == [
        AttackAction(Coord(6, 5)),
        AttackAction(Coord(5, 4)),
        AttackAction(Coord(5, 6)),
    ]
    assert result.confidence == 0.8
    assert result.strategy_name == "hunt_target"


def test_aligned_hits_prefer_cells_on_the_line(make_context, record_shot) -> None:
    memory = AIMemory()
    record_shot(memory, Coord(5, 5), AttackOutcome.HIT, "s1")
    record_shot(memory, Coord(6, 5), AttackOutcome.HIT, "s1")
    result = HuntTargetStrategy().execute(make_context(memory=memory))
    assert result.action == AttackAction(Coord(4, 5))
    assert result.alternatives[0] == AttackAction(Coord(7, 5))

    vertical = AIMemory()
    record_shot(vertical, Coord(5, 5), AttackOutcome.HIT, "s2")
    record_shot(vertical, Coord(5, 6), AttackOutcome.HIT, "s2")
    result = HuntTargetStrategy().execute(make_context(memory=vertical))
    assert result.action == AttackAction(Coord(5, 4))


def test_hunt_mode_uses_parity_and_never_repeats(make_context, record_shot) -> None:
    memory = AIMemory()
    strategy = HuntTargetStrategy()
    seen: list[Coord] = []
    for turn in range(100):
        context = make_context(memory=memory, seed=turn)
        assert strategy.is_applicable(context)
        action = strategy.execute(context).action
        assert isinstance(action, AttackAction)
        if turn < 50:
            assert (action.target.x + action.target.y) % 2 == 0
        seen.append(action.target)
        record_shot(memory, action.target)
    assert len(set(seen)) == 100
    assert not strategy.is_applicable(make_context(memory=memory))


def test_priority_rises_with_unsunk_hits(make_context, record_shot) -> None:
    memory = AIMemory()
    strategy = HuntTargetStrategy()
    assert strategy.calculate_priority(make_context(memory=memory)) == 0.5
    record_shot(memory, Coord(2, 2), AttackOutcome.HIT, "s1")
    assert strategy.calculate_priority(make_context(memory=memory)) == 0.9
    record_shot(memory, Coord(2, 3), AttackOutcome.SUNK, "s1", sunk_size=2)
    assert strategy.calculate_priority(make_context(memory=memory)) == 0.5
