"""Strategy selection by kind, applicability and priority."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from battlefleet.engine.ai.utility import clamp_unit, ranked_actions
from battlefleet.game.ai.ability_strategies import (
    DefensiveAbilityStrategy,
    OffensiveAbilityStrategy,
    ability_target,
)
from battlefleet.game.ai.context import (
    AbilityAction,
    AIContext,
    AttackAction,
    StrategyKind,
    StrategyResult,
)
from battlefleet.game.ai.hunt_target import HuntTargetStrategy
from battlefleet.game.ai.placement import (
    ClusteredPlacementStrategy,
    DistributedPlacementStrategy,
    random_layout,
)
from battlefleet.game.ai.probability_density import ProbabilityDensityStrategy
from battlefleet.game.ai.strategy import Strategy
from battlefleet.game.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def default_strategies() -> list[Strategy]:
    return [
        HuntTargetStrategy(),
        ProbabilityDensityStrategy(),
        ClusteredPlacementStrategy(),
        DistributedPlacementStrategy(),
        OffensiveAbilityStrategy(),
        DefensiveAbilityStrategy(),
    ]


class StrategyFactory:
    """Ranks an explicit strategy list; ties keep registration order."""

    def __init__(self, strategies: Sequence[Strategy] | None = None) -> None:
        self._strategies = list(strategies) if strategies is not None else default_strategies()
        names = [strategy.name for strategy in self._strategies]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Strategy names must be unique: {names}.")

    @property
    def strategies(self) -> list[Strategy]:
        return list(self._strategies)

    def rank(self, kind: StrategyKind, context: AIContext) -> list[Strategy]:
        """Applicable strategies of ``kind`` by descending priority."""
        by_name = {
            strategy.name: strategy
            for strategy in self._strategies
            if strategy.kind is kind and strategy.is_applicable(context)
        }
        scores = {
            name: clamp_unit(strategy.calculate_priority(context)) for name, strategy in by_name.items()
        }
        return [by_name[name] for name in ranked_actions(scores)]

    def select(self, kind: StrategyKind, context: AIContext) -> Strategy | None:
        ranked = self.rank(kind, context)
        return ranked[0] if ranked else None

    def execute(self, kind: StrategyKind, context: AIContext) -> StrategyResult:
        """Run the best applicable strategy, or a uniform random legal fallback."""
        strategy = self.select(kind, context)
        if strategy is not None:
            result = strategy.execute(context)
            if result.action is not None:
                logger.debug(
                    "strategy_selected player=%s kind=%s strategy=%s confidence=%.2f",
                    context.player_id,
                    kind,
                    strategy.name,
                    result.confidence,
                )
                return result
        return self.fallback(kind, context)

    def fallback(self, kind: StrategyKind, context: AIContext) -> StrategyResult:
        if kind is StrategyKind.PLACEMENT:
            return random_layout(context)
        if kind is StrategyKind.ABILITY:
            if not context.abilities:
                return StrategyResult(None, 0.0, ["No ability is ready."], strategy_name="fallback")
            option = context.rng.choice(context.abilities)
            target = ability_target(context) if option.requires_target else None
            return StrategyResult(
                AbilityAction(option.ship_id, option.ability_id, target),
                0.1,
                [f"No ability strategy applies; trying {option.name} at random."],
                strategy_name="fallback",
            )
        open_cells = context.unshot_cells()
        if not open_cells:
            return StrategyResult(None, 0.0, ["Every cell has been fired at."], strategy_name="fallback")
        choice = context.rng.choice(open_cells)
        return StrategyResult(
            AttackAction(choice),
            0.1,
            [f"No targeting strategy applies; firing at random ({choice.x}, {choice.y})."],
            strategy_name="fallback",
        )
