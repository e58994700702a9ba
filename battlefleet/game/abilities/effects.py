"""Per-ability effect functions keyed by ability id."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from battlefleet.game.abilities.models import (
    AbilityContext,
    AbilityDefinition,
    AbilityExecutionResult,
    AbilityInstance,
    ActiveEffect,
    EffectSource,
    EffectSpec,
    EffectTarget,
    EffectType,
    Trigger,
)
from battlefleet.game.core.board import Board
from battlefleet.game.core.errors import ErrorCode, ValidationError
from battlefleet.game.core.models import Coord
from battlefleet.game.core.rules import GameSession

logger = logging.getLogger(__name__)

EffectFn = Callable[[AbilityDefinition, AbilityInstance, AbilityContext], AbilityExecutionResult]
PredicateFn = Callable[[AbilityDefinition, AbilityInstance, AbilityContext], str | None]


@dataclass(frozen=True, slots=True)
class AbilityBehavior:
    """Effect function plus optional ability-specific activation predicate."""

    execute: EffectFn
    can_activate: PredicateFn | None = None


def ship_effects(session: GameSession, ship_id: str) -> list[ActiveEffect]:
    """Collect live effects held by every ability instance of one ship."""
    ship = session.ships.get(ship_id)
    if ship is None:
        return []
    effects: list[ActiveEffect] = []
    for instance_id in ship.ability_ids:
        instance = session.abilities.get(instance_id)
        if instance is not None:
            effects.extend(instance.active_effects)
    return effects


def stealth_resistance(session: GameSession, ship_id: str) -> float:
    magnitudes = [
        effect.magnitude
        for effect in ship_effects(session, ship_id)
        if effect.type is EffectType.STEALTH
    ]
    return max(magnitudes, default=0.0)


def strip_effects(session: GameSession, ship_id: str, effect_type: EffectType) -> int:
    """Remove every effect of one type from a ship; return how many were dropped."""
    ship = session.ships.get(ship_id)
    if ship is None:
        return 0
    removed = 0
    for instance_id in ship.ability_ids:
        instance = session.abilities.get(instance_id)
        if instance is None:
            continue
        kept = [effect for effect in instance.active_effects if effect.type is not effect_type]
        removed += len(instance.active_effects) - len(kept)
        instance.active_effects = kept
    return removed


def _make_effect(
    spec: EffectSpec,
    instance: AbilityInstance,
    context: AbilityContext,
    target: EffectTarget | None = None,
) -> ActiveEffect:
    return ActiveEffect(
        id=f"{instance.id}#{instance.times_used + 1}:{spec.type}",
        type=spec.type,
        magnitude=spec.magnitude,
        start_turn=context.turn_number,
        remaining_duration=spec.duration,
        source=EffectSource(instance.definition_id, instance.ship_id, instance.player_id),
        target=target,
    )


def _enemy_board(context: AbilityContext) -> Board:
    return context.session.board_of(context.session.opponent_of(context.ship.player_id))


def _require_enemy_target(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> str | None:
    if context.target is None:
        return f"{definition.name} requires a target coordinate."
    if not _enemy_board(context).in_bounds(context.target):
        return f"Target ({context.target.x}, {context.target.y}) is outside the enemy board."
    return None


def _all_big_guns(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> AbilityExecutionResult:
    spec = definition.effect(EffectType.DAMAGE_BOOST)
    instance.active_effects = [
        effect for effect in instance.active_effects if effect.type is not EffectType.DAMAGE_BOOST
    ]
    effect = _make_effect(spec, instance, context, EffectTarget(ship_id=context.ship.id))
    return AbilityExecutionResult(
        success=True,
        ability_id=definition.id,
        ship_id=context.ship.id,
        effects=[effect],
        messages=[f"{context.ship.id} primes all main guns: next attack deals x{spec.magnitude:g} damage."],
    )


def _armor_piercing(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> AbilityExecutionResult:
    spec = definition.effect(EffectType.ARMOR_PIERCING)
    instance.active_effects = [
        effect for effect in instance.active_effects if effect.type is not EffectType.ARMOR_PIERCING
    ]
    effect = _make_effect(spec, instance, context, EffectTarget(ship_id=context.ship.id))
    return AbilityExecutionResult(
        success=True,
        ability_id=definition.id,
        ship_id=context.ship.id,
        effects=[effect],
        messages=[
            f"{context.ship.id} loads armor-piercing shells "
            f"(penetration {spec.magnitude:g} for {spec.duration} turns)."
        ],
    )


def _air_scout(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> AbilityExecutionResult:
    if context.target is None:
        return AbilityExecutionResult.rejected(
            definition.id,
            context.ship.id,
            ValidationError(ErrorCode.CONDITIONS_NOT_MET, "Air scout needs a target coordinate.", "target"),
        )
    spec = definition.effect(EffectType.REVEAL)
    board = _enemy_board(context)
    area = board.area(context.target, spec.radius)
    revealed: list[Coord] = []
    detected: list[str] = []
    concealed: list[str] = []
    for cell in area:
        if board.reveal(cell, spec.duration or 1):
            revealed.append(cell)
        ship_id = board.ship_at(cell)
        if ship_id is None or ship_id in detected or ship_id in concealed:
            continue
        # Stealthed contacts are revealed on the grid but not identified.
        if stealth_resistance(context.session, ship_id) > 0:
            concealed.append(ship_id)
        else:
            detected.append(ship_id)
    effect = _make_effect(spec, instance, context, EffectTarget(coordinate=context.target, area=tuple(area)))
    messages = [f"Air scout over ({context.target.x}, {context.target.y}) spotted {len(detected)} ship(s)."]
    if concealed:
        messages.append(f"{len(concealed)} contact(s) could not be identified under stealth.")
    return AbilityExecutionResult(
        success=True,
        ability_id=definition.id,
        ship_id=context.ship.id,
        effects=[effect],
        messages=messages,
        coordinates_revealed=revealed,
        ships_detected=detected,
    )


def _silent_running_ready(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> str | None:
    if context.ship.has_fired:
        return "Silent running is broken once the submarine has attacked."
    if any(effect.type is EffectType.STEALTH for effect in instance.active_effects):
        return "Silent running is already engaged."
    return None


def _silent_running(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> AbilityExecutionResult:
    spec = definition.effect(EffectType.STEALTH)
    effect = _make_effect(spec, instance, context, EffectTarget(ship_id=context.ship.id))
    return AbilityExecutionResult(
        success=True,
        ability_id=definition.id,
        ship_id=context.ship.id,
        effects=[effect],
        messages=[f"{context.ship.id} runs silent (detection resistance {spec.magnitude:g})."],
    )


def _sonar_ping(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> AbilityExecutionResult:
    if context.target is None:
        return AbilityExecutionResult.rejected(
            definition.id,
            context.ship.id,
            ValidationError(ErrorCode.CONDITIONS_NOT_MET, "Sonar ping needs a target coordinate.", "target"),
        )
    spec = definition.effect(EffectType.DETECTION)
    board = _enemy_board(context)
    area = board.area(context.target, spec.radius)
    revealed: list[Coord] = []
    detected: list[str] = []
    exposed: list[str] = []
    for cell in area:
        ship_id = board.ship_at(cell)
        if ship_id is None:
            continue
        resistance = stealth_resistance(context.session, ship_id)
        if resistance >= spec.magnitude:
            continue
        if resistance > 0 and strip_effects(context.session, ship_id, EffectType.STEALTH):
            exposed.append(ship_id)
        if board.reveal(cell, spec.duration or 1):
            revealed.append(cell)
        if ship_id not in detected:
            detected.append(ship_id)
    effect = _make_effect(spec, instance, context, EffectTarget(coordinate=context.target, area=tuple(area)))
    messages = [f"Sonar ping at ({context.target.x}, {context.target.y}) detected {len(detected)} ship(s)."]
    for ship_id in exposed:
        messages.append(f"Submarine {ship_id} forced out of silent running.")
    if exposed:
        logger.info("sonar_exposed_submarines ships=%s", ",".join(exposed))
    return AbilityExecutionResult(
        success=True,
        ability_id=definition.id,
        ship_id=context.ship.id,
        effects=[effect],
        messages=messages,
        coordinates_revealed=revealed,
        ships_detected=detected,
    )


def repositioning_options(context: AbilityContext, max_range: int) -> list[tuple[int, int]]:
    """Return (dx, dy) shifts that keep the ship on its board without overlapping others."""
    board = context.session.board_of(context.ship.player_id)
    own_index = board.ship_ids.index(context.ship.id) + 1 if context.ship.id in board.ship_ids else 0
    options: list[tuple[int, int]] = []
    for dy in range(-max_range, max_range + 1):
        for dx in range(-max_range, max_range + 1):
            if (dx, dy) == (0, 0) or abs(dx) + abs(dy) > max_range:
                continue
            shifted = [cell.offset(dx, dy) for cell in context.ship.cells]
            if all(
                board.in_bounds(cell) and int(board.occupancy[cell.y, cell.x]) in (0, own_index)
                for cell in shifted
            ):
                options.append((dx, dy))
    return options


def _speed_advantage_ready(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> str | None:
    if context.trigger is not Trigger.ON_DAMAGE or context.damage_taken <= 0:
        return "Speed advantage only triggers after taking damage."
    spec = definition.effect(EffectType.MOVEMENT)
    if not repositioning_options(context, int(spec.magnitude)):
        return "No open water to manoeuvre into."
    return None


def _speed_advantage(
    definition: AbilityDefinition, instance: AbilityInstance, context: AbilityContext
) -> AbilityExecutionResult:
    spec = definition.effect(EffectType.MOVEMENT)
    options = repositioning_options(context, int(spec.magnitude))
    effect = _make_effect(spec, instance, context, EffectTarget(ship_id=context.ship.id))
    return AbilityExecutionResult(
        success=True,
        ability_id=definition.id,
        ship_id=context.ship.id,
        effects=[effect],
        messages=[
            f"{context.ship.id} gains speed advantage: may move up to {spec.magnitude:g} cells "
            f"({len(options)} open positions)."
        ],
    )


ABILITY_BEHAVIORS: dict[str, AbilityBehavior] = {
    "all_big_guns": AbilityBehavior(_all_big_guns),
    "armor_piercing": AbilityBehavior(_armor_piercing),
    "air_scout": AbilityBehavior(_air_scout, _require_enemy_target),
    "silent_running": AbilityBehavior(_silent_running, _silent_running_ready),
    "sonar_ping": AbilityBehavior(_sonar_ping, _require_enemy_target),
    "speed_advantage": AbilityBehavior(_speed_advantage, _speed_advantage_ready),
}
