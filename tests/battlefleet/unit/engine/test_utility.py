from __future__ import annotations

from battlefleet.engine.ai.utility import best_action, clamp_unit, ranked_actions


def test_clamp_unit() -> None:
    assert clamp_unit(-0.5) == 0.0
    assert clamp_unit(0.4) == 0.4
    assert clamp_unit(1.7) == 1.0


def test_ranked_actions_keep_insertion_order_on_ties() -> None:
    scores = {"hunt": 0.5, "density": 0.7, "random": 0.5}
    assert ranked_actions(scores) == ["density", "hunt", "random"]
    assert best_action(scores) == "density"
    assert best_action({}) is None
