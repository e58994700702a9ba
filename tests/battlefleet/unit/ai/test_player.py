import random

import pytest

from battlefleet.game.ai.context import AbilityAction, AttackAction, BehaviorProfile, PlacementAction
from battlefleet.game.ai.player import AIPlayer
from battlefleet.game.app.battle import Battle
from battlefleet.game.catalog.standard import STANDARD_FLEET
from battlefleet.game.combat.validator import AttackRequest
from battlefleet.game.core.models import Coord


def test_ready_abilities_exclude_engaged_passives(ready_battle: Battle) -> None:
    player = AIPlayer("p1", random.Random(3), "advanced")
    context = player.build_context(10, 10, session=ready_battle.session, processor=ready_battle.processor)
    names = [(option.ship_id, option.ability_id) for option in context.abilities]
    assert ("p1_submarine", "silent_running") not in names
    assert ("p1_battleship", "all_big_guns") in names
    assert ("p1_carrier", "air_scout") in names


def test_advanced_player_picks_offensive_ability(ready_battle: Battle) -> None:
    player = AIPlayer("p1", random.Random(3), "advanced")
    decision = player.choose_ability(ready_battle.session, ready_battle.processor)
    assert decision.action == AbilityAction("p1_battleship", "all_big_guns", None)
    assert decision.strategy_name == "offensive_ability"


def test_beginner_never_uses_abilities(ready_battle: Battle) -> None:
    player = AIPlayer("p1", random.Random(3), "beginner")
    decision = player.choose_ability(ready_battle.session, ready_battle.processor)
    assert decision.action is None


def test_attack_choice_is_open_and_in_bounds(ready_battle: Battle) -> None:
    player = AIPlayer("p1", random.Random(11), "beginner")
    for _ in range(20):
        decision = player.choose_attack(ready_battle.session)
        assert isinstance(decision.action, AttackAction)
        target = decision.action.target
        assert 0 <= target.x < 10 and 0 <= target.y < 10
        assert not player.memory.is_shot(target)
        player.memory.shots_fired.add(target)


def test_threat_is_fraction_of_lost_hit_points(ready_battle: Battle) -> None:
    ready_battle.attack(AttackRequest("p1", Coord(3, 3)))
    player = AIPlayer("p2", random.Random(1))
    assert player.assess_threat(ready_battle.session) == pytest.approx(1 / 17)
    assert player.critical_ships(ready_battle.session) == ["p2_destroyer"]


def test_placement_decision_covers_requested_fleet() -> None:
    player = AIPlayer("p2", random.Random(5), behavior=BehaviorProfile.DEFENSIVE)
    decision = player.choose_placement(STANDARD_FLEET, 10, 10)
    assert decision.strategy_name == "clustered_placement"
    assert isinstance(decision.action, PlacementAction)
    assert len(decision.action.placements) == len(STANDARD_FLEET)


def test_unpredictable_profile_picks_a_stable_profile_per_turn() -> None:
    player = AIPlayer("p1", random.Random(9), behavior=BehaviorProfile.UNPREDICTABLE)
    context = player.build_context(10, 10)
    assert context.behavior is not BehaviorProfile.UNPREDICTABLE
