"""Validation, activation and turn-end bookkeeping for one ability instance."""

from __future__ import annotations

import logging

from battlefleet.game.abilities.effects import AbilityBehavior
from battlefleet.game.abilities.models import (
    AbilityContext,
    AbilityDefinition,
    AbilityExecutionResult,
    AbilityInstance,
    AbilityValidation,
    ActiveEffect,
)
from battlefleet.game.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


def validate(
    definition: AbilityDefinition,
    instance: AbilityInstance,
    context: AbilityContext,
    behavior: AbilityBehavior | None = None,
) -> AbilityValidation:
    """Return whether ``instance`` may activate now. Never raises for player input."""

    def reject(code: ErrorCode, reason: str) -> AbilityValidation:
        return AbilityValidation(
            can_activate=False,
            code=code,
            reason=reason,
            cooldown_remaining=instance.current_cooldown,
            uses_remaining=instance.remaining_uses,
        )

    # Sinking also deactivates the instance, so report it first.
    if context.ship.is_sunk:
        return reject(ErrorCode.SHIP_SUNK, f"{context.ship.id} has been sunk.")
    if not instance.is_active:
        return reject(ErrorCode.ABILITY_INACTIVE, f"{definition.name} is not active.")
    if instance.current_cooldown > 0:
        return reject(
            ErrorCode.ABILITY_ON_COOLDOWN,
            f"{definition.name} is on cooldown for {instance.current_cooldown} more turn(s).",
        )
    if instance.remaining_uses is not None and instance.remaining_uses <= 0:
        return reject(ErrorCode.NO_USES_REMAINING, f"{definition.name} has no uses remaining.")
    unmet = definition.requirements.unmet_reason(
        context.ship.ship_class, context.ship.era, context.ship.size
    )
    if unmet is not None:
        return reject(ErrorCode.REQUIREMENTS_NOT_MET, unmet)
    if behavior is not None and behavior.can_activate is not None:
        reason = behavior.can_activate(definition, instance, context)
        if reason is not None:
            return reject(ErrorCode.CONDITIONS_NOT_MET, reason)
    return AbilityValidation(
        can_activate=True,
        cooldown_remaining=0,
        uses_remaining=instance.remaining_uses,
    )


def activate(
    definition: AbilityDefinition,
    instance: AbilityInstance,
    context: AbilityContext,
    behavior: AbilityBehavior,
) -> AbilityExecutionResult:
    """Re-validate, run the effect function and commit usage on success."""
    verdict = validate(definition, instance, context, behavior)
    if not verdict.can_activate:
        code = verdict.code or ErrorCode.CONDITIONS_NOT_MET
        return AbilityExecutionResult.rejected(
            definition.id, instance.ship_id, ValidationError(code, verdict.reason)
        )

    result = behavior.execute(definition, instance, context)
    if not result.success:
        return result

    instance.current_cooldown = definition.cooldown_turns
    if instance.remaining_uses is not None:
        instance.remaining_uses -= 1
    instance.times_used += 1
    instance.last_used_turn = context.turn_number
    instance.total_damage_dealt += result.damage_dealt
    instance.active_effects.extend(result.effects)
    logger.info(
        "ability_activated",
        extra={
            "ability_id": definition.id,
            "ship_id": instance.ship_id,
            "player_id": instance.player_id,
            "turn": context.turn_number,
            "cooldown": instance.current_cooldown,
            "uses_remaining": instance.remaining_uses,
        },
    )
    return result


def update_turn_end(instance: AbilityInstance) -> list[ActiveEffect]:
    """Tick cooldown and effect durations by one turn; return expired effects."""
    instance.current_cooldown = max(0, instance.current_cooldown - 1)
    kept: list[ActiveEffect] = []
    expired: list[ActiveEffect] = []
    for effect in instance.active_effects:
        if effect.remaining_duration is None:
            kept.append(effect)
            continue
        effect.remaining_duration -= 1
        if effect.remaining_duration > 0:
            kept.append(effect)
        else:
            expired.append(effect)
    instance.active_effects = kept
    return expired
