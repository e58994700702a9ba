"""AI strategy engine."""

from battlefleet.game.ai.context import (
    AbilityAction,
    AIContext,
    AttackAction,
    BehaviorProfile,
    Difficulty,
    PlacementAction,
    StrategyKind,
    StrategyResult,
)
from battlefleet.game.ai.factory import StrategyFactory, default_strategies
from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.ai.player import AIPlayer

__all__ = [
    "AIContext",
    "AIMemory",
    "AIPlayer",
    "AbilityAction",
    "AttackAction",
    "BehaviorProfile",
    "Difficulty",
    "PlacementAction",
    "StrategyFactory",
    "StrategyKind",
    "StrategyResult",
    "default_strategies",
]
