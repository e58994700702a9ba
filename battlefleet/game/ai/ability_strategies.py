"""Keyword-driven offensive and defensive ability use."""

from __future__ import annotations

from battlefleet.game.ai.context import (
    AbilityAction,
    AbilityOption,
    AIContext,
    BehaviorProfile,
    StrategyKind,
    StrategyResult,
)
from battlefleet.game.ai.strategy import Strategy
from battlefleet.game.core.models import Coord

OFFENSIVE_KEYWORDS: tuple[str, ...] = (
    "damage",
    "attack",
    "strike",
    "barrage",
    "armor piercing",
    "armor-piercing",
    "big guns",
)
DEFENSIVE_KEYWORDS: tuple[str, ...] = ("shield", "evade", "repair", "armor", "defense", "silent")
DEFENSIVE_THREAT_THRESHOLD = 0.5


def _matches(option: AbilityOption, keywords: tuple[str, ...]) -> bool:
    name = option.name.lower()
    return any(keyword in name for keyword in keywords)


def offensive_options(context: AIContext) -> list[AbilityOption]:
    return [option for option in context.abilities if _matches(option, OFFENSIVE_KEYWORDS)]


def defensive_options(context: AIContext) -> list[AbilityOption]:
    return [
        option
        for option in context.abilities
        if _matches(option, DEFENSIVE_KEYWORDS) and not _matches(option, OFFENSIVE_KEYWORDS)
    ]


def ability_target(context: AIContext) -> Coord | None:
    """Pick a target for area abilities: near an unsunk hit, else the first open parity cell."""
    for hit in context.memory.active_hits():
        return hit
    for cell in context.unshot_cells():
        if (cell.x + cell.y) % 2 == 0:
            return cell
    return None


def _action_for(option: AbilityOption, context: AIContext) -> AbilityAction:
    target = ability_target(context) if option.requires_target else None
    return AbilityAction(option.ship_id, option.ability_id, target)


class OffensiveAbilityStrategy(Strategy):
    name = "offensive_ability"
    kind = StrategyKind.ABILITY

    def is_applicable(self, context: AIContext) -> bool:
        return context.settings.use_abilities and bool(offensive_options(context))

    def calculate_priority(self, context: AIContext) -> float:
        return 0.8 if context.behavior is BehaviorProfile.AGGRESSIVE else 0.5

    def execute(self, context: AIContext) -> StrategyResult:
        options = offensive_options(context)
        chosen = options[0]
        return self.create_result(
            _action_for(chosen, context),
            0.7,
            [f"Using offensive ability {chosen.name} on {chosen.ship_id}."],
            [_action_for(option, context) for option in options[1:]],
        )


class DefensiveAbilityStrategy(Strategy):
    name = "defensive_ability"
    kind = StrategyKind.ABILITY

    def is_applicable(self, context: AIContext) -> bool:
        if not context.settings.use_abilities:
            return False
        return context.threat_level > DEFENSIVE_THREAT_THRESHOLD and bool(defensive_options(context))

    def calculate_priority(self, context: AIContext) -> float:
        return context.threat_level * 0.9

    def execute(self, context: AIContext) -> StrategyResult:
        options = defensive_options(context)
        chosen = options[0]
        return self.create_result(
            _action_for(chosen, context),
            0.8,
            [
                f"Threat level {context.threat_level:.2f} exceeds {DEFENSIVE_THREAT_THRESHOLD}.",
                f"Using defensive ability {chosen.name} on {chosen.ship_id}.",
            ],
            [_action_for(option, context) for option in options[1:]],
        )
