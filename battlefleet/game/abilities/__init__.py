"""Ship special-ability system."""

from battlefleet.game.abilities.factory import AbilityFactory
from battlefleet.game.abilities.models import (
    AbilityDefinition,
    AbilityExecutionResult,
    AbilityInstance,
    AbilityState,
    ActiveEffect,
    EffectType,
    Trigger,
)
from battlefleet.game.abilities.processor import AbilityProcessor, ProcessorConfig

__all__ = [
    "AbilityDefinition",
    "AbilityExecutionResult",
    "AbilityFactory",
    "AbilityInstance",
    "AbilityProcessor",
    "AbilityState",
    "ActiveEffect",
    "EffectType",
    "ProcessorConfig",
    "Trigger",
]
