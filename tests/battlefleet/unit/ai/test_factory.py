import pytest

from battlefleet.game.ai.context import AbilityOption, AttackAction, Difficulty, StrategyKind
from battlefleet.game.ai.factory import StrategyFactory
from battlefleet.game.ai.hunt_target import HuntTargetStrategy
from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.catalog.standard import STANDARD_FLEET
from battlefleet.game.core.errors import ConfigurationError
from battlefleet.game.core.models import AttackOutcome, Coord


def test_selection_depends_on_difficulty_and_hits(make_context, record_shot) -> None:
    factory = StrategyFactory()
    intermediate = factory.select(StrategyKind.TARGETING, make_context(Difficulty.INTERMEDIATE))
    assert intermediate is not None and intermediate.name == "hunt_target"

    advanced = factory.rank(StrategyKind.TARGETING, make_context(Difficulty.ADVANCED))
    assert [strategy.name for strategy in advanced] == ["probability_density", "hunt_target"]

    memory = AIMemory()
    record_shot(memory, Coord(2, 2), AttackOutcome.HIT, "s1")
    chosen = factory.select(StrategyKind.TARGETING, make_context(Difficulty.ADVANCED, memory=memory))
    assert chosen is not None and chosen.name == "hunt_target"


def test_placement_kind_only_ranks_placement_strategies(make_context) -> None:
    ranked = StrategyFactory().rank(StrategyKind.PLACEMENT, make_context(ships_to_place=STANDARD_FLEET))
    assert {strategy.name for strategy in ranked} == {"clustered_placement", "distributed_placement"}


def test_empty_factory_falls_back_to_random_legal_action(make_context) -> None:
    factory = StrategyFactory([])
    result = factory.execute(StrategyKind.TARGETING, make_context())
    assert isinstance(result.action, AttackAction)
    assert result.strategy_name == "fallback"
    assert result.confidence == 0.1

    idle = factory.execute(StrategyKind.ABILITY, make_context())
    assert idle.action is None

    option = AbilityOption("p1_carrier", "air_scout", "Air Scout", requires_target=True)
    guess = factory.execute(StrategyKind.ABILITY, make_context(abilities=(option,)))
    assert guess.action is not None
    assert guess.action.target == Coord(0, 0)


def test_strategy_names_must_be_unique() -> None:
    with pytest.raises(ConfigurationError):
        StrategyFactory([HuntTargetStrategy(), HuntTargetStrategy()])
