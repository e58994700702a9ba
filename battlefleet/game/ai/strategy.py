"""AI strategy contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from battlefleet.game.ai.context import AIContext, StrategyAction, StrategyKind, StrategyResult


class Strategy(ABC):
    """One interchangeable decision algorithm."""

    name: str = ""
    kind: StrategyKind = StrategyKind.TARGETING

    @abstractmethod
    def is_applicable(self, context: AIContext) -> bool:
        """Return whether this strategy can act in ``context``."""

    @abstractmethod
    def calculate_priority(self, context: AIContext) -> float:
        """Return a score in [0, 1] used to rank applicable strategies."""

    @abstractmethod
    def execute(self, context: AIContext) -> StrategyResult:
        """Return the recommended action."""

    def create_result(
        self,
        action: StrategyAction | None,
        confidence: float,
        reasoning: Sequence[str],
        alternatives: Sequence[StrategyAction] = (),
    ) -> StrategyResult:
        return StrategyResult(
            action=action,
            confidence=confidence,
            reasoning=list(reasoning),
            alternatives=list(alternatives),
            strategy_name=self.name,
        )
