"""Battle-wide ability processing: caps, global cooldowns, effects and triggers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from battlefleet.game.abilities import lifecycle
from battlefleet.game.abilities.effects import ship_effects, strip_effects
from battlefleet.game.abilities.factory import AbilityFactory
from battlefleet.game.abilities.models import (
    AbilityContext,
    AbilityExecutionResult,
    AbilityInstance,
    AbilityType,
    AbilityValidation,
    ActiveEffect,
    EffectType,
    Trigger,
)
from battlefleet.game.core.errors import ErrorCode, ValidationError
from battlefleet.game.core.models import Coord
from battlefleet.game.core.rules import GameSession
from battlefleet.game.core.ship import Ship

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessorConfig:
    max_abilities_per_turn: int = 1
    global_cooldown_turns: int = 0


@dataclass(frozen=True, slots=True)
class ActivationRecord:
    """One committed activation, kept for replay and debug tooling."""

    ability_id: str
    instance_id: str
    ship_id: str
    player_id: str
    turn_number: int
    trigger: Trigger | None = None


class AbilityProcessor:
    """Applies ability rules on top of the per-instance lifecycle.

    Rejections at this level (turn cap, global cooldown, unknown ship or
    ability) never touch any instance.
    """

    def __init__(
        self,
        factory: AbilityFactory,
        session: GameSession,
        config: ProcessorConfig | None = None,
    ) -> None:
        self._factory = factory
        self._session = session
        self._config = config or ProcessorConfig()
        self._history: list[ActivationRecord] = []
        self._turn_counts: dict[tuple[str, int], int] = {}
        self._global_cooldowns: dict[str, int] = {}

    @property
    def factory(self) -> AbilityFactory:
        return self._factory

    @property
    def session(self) -> GameSession:
        return self._session

    def register_ship(self, ship: Ship) -> list[AbilityInstance]:
        """Create and store the ability instances a ship qualifies for."""
        instances = self._factory.create_abilities_for_ship(ship)
        for instance in instances:
            self._session.abilities[instance.id] = instance
        ship.ability_ids = [instance.id for instance in instances]
        return instances

    def instances_for_ship(self, ship_id: str) -> list[AbilityInstance]:
        ship = self._session.ships.get(ship_id)
        if ship is None:
            return []
        return [self._session.abilities[instance_id] for instance_id in ship.ability_ids]

    def instances_for_player(self, player_id: str) -> list[AbilityInstance]:
        return [
            instance
            for ship in self._session.ships_of(player_id)
            for instance in self.instances_for_ship(ship.id)
        ]

    def find_instance(self, ship_id: str, ability_id: str) -> AbilityInstance | None:
        for instance in self.instances_for_ship(ship_id):
            if instance.definition_id == ability_id:
                return instance
        return None

    def global_cooldown(self, player_id: str) -> int:
        return self._global_cooldowns.get(player_id, 0)

    def activations_this_turn(self, player_id: str) -> int:
        return self._turn_counts.get((player_id, self._session.turn_number), 0)

    def validate(
        self,
        player_id: str,
        ship_id: str,
        ability_id: str,
        target: Coord | None = None,
    ) -> AbilityValidation:
        """Validate a manual activation request without side effects."""
        ship = self._session.ships.get(ship_id)
        if ship is None or ship.player_id != player_id:
            return AbilityValidation(False, ErrorCode.SHIP_NOT_FOUND, f"Ship '{ship_id}' not found.")
        instance = self.find_instance(ship_id, ability_id)
        definition = self._factory.get_definition(ability_id)
        if instance is None or definition is None:
            return AbilityValidation(
                False, ErrorCode.ABILITY_NOT_FOUND, f"Ship '{ship_id}' has no ability '{ability_id}'."
            )
        if definition.type is AbilityType.TRIGGERED:
            return AbilityValidation(
                False,
                ErrorCode.CONDITIONS_NOT_MET,
                f"{definition.name} only activates from its trigger.",
                instance.current_cooldown,
                instance.remaining_uses,
            )
        if self.global_cooldown(player_id) > 0:
            return AbilityValidation(
                False,
                ErrorCode.GLOBAL_COOLDOWN,
                f"Abilities are on global cooldown for {self.global_cooldown(player_id)} more turn(s).",
                instance.current_cooldown,
                instance.remaining_uses,
            )
        if self.activations_this_turn(player_id) >= self._config.max_abilities_per_turn:
            return AbilityValidation(
                False,
                ErrorCode.ABILITY_LIMIT_REACHED,
                f"Only {self._config.max_abilities_per_turn} ability activation(s) allowed per turn.",
                instance.current_cooldown,
                instance.remaining_uses,
            )
        context = self._context(ship, target)
        return lifecycle.validate(definition, instance, context, self._factory.behavior(ability_id))

    def activate(
        self,
        player_id: str,
        ship_id: str,
        ability_id: str,
        target: Coord | None = None,
    ) -> AbilityExecutionResult:
        """Validate and activate one ability on behalf of a player."""
        verdict = self.validate(player_id, ship_id, ability_id, target)
        if not verdict.can_activate:
            error = verdict.as_error() or ValidationError(ErrorCode.CONDITIONS_NOT_MET, verdict.reason)
            logger.debug(
                "ability_rejected player=%s ship=%s ability=%s code=%s",
                player_id,
                ship_id,
                ability_id,
                error.code,
            )
            return AbilityExecutionResult.rejected(ability_id, ship_id, error)

        ship = self._session.ships[ship_id]
        instance = self.find_instance(ship_id, ability_id)
        if instance is None:
            raise KeyError(f"{ship_id}:{ability_id}")
        result = self._run(instance, self._context(ship, target))
        if result.success:
            key = (player_id, self._session.turn_number)
            self._turn_counts[key] = self._turn_counts.get(key, 0) + 1
            if self._config.global_cooldown_turns > 0:
                self._global_cooldowns[player_id] = self._config.global_cooldown_turns
        return result

    def activate_passives(self, player_id: str) -> list[AbilityExecutionResult]:
        """Engage every passive ability of a player; not counted against the turn cap."""
        results: list[AbilityExecutionResult] = []
        for instance in self.instances_for_player(player_id):
            definition = self._factory.get_definition(instance.definition_id)
            if definition is None or definition.type is not AbilityType.PASSIVE:
                continue
            ship = self._session.ships[instance.ship_id]
            context = self._context(ship, None)
            if lifecycle.validate(
                definition, instance, context, self._factory.behavior(definition.id)
            ).can_activate:
                results.append(self._run(instance, context))
        return results

    def process_triggered(
        self,
        trigger: Trigger,
        player_id: str,
        ship_ids: Iterable[str] | None = None,
        damage_taken: int = 0,
    ) -> list[AbilityExecutionResult]:
        """Auto-validate and activate abilities registered for ``trigger``."""
        wanted = set(ship_ids) if ship_ids is not None else None
        results: list[AbilityExecutionResult] = []
        for instance in self.instances_for_player(player_id):
            if wanted is not None and instance.ship_id not in wanted:
                continue
            definition = self._factory.get_definition(instance.definition_id)
            if definition is None or trigger not in definition.triggers:
                continue
            ship = self._session.ships[instance.ship_id]
            context = self._context(ship, None, trigger=trigger, damage_taken=damage_taken)
            if lifecycle.validate(
                definition, instance, context, self._factory.behavior(definition.id)
            ).can_activate:
                results.append(self._run(instance, context))
        return results

    def _context(
        self,
        ship: Ship,
        target: Coord | None,
        *,
        trigger: Trigger | None = None,
        damage_taken: int = 0,
    ) -> AbilityContext:
        return AbilityContext(
            session=self._session,
            ship=ship,
            turn_number=self._session.turn_number,
            target=target,
            trigger=trigger,
            damage_taken=damage_taken,
        )

    def _run(self, instance: AbilityInstance, context: AbilityContext) -> AbilityExecutionResult:
        definition = self._factory.get_definition(instance.definition_id)
        if definition is None:
            raise KeyError(instance.definition_id)
        result = lifecycle.activate(definition, instance, context, self._factory.behavior(definition.id))
        if result.success:
            self._history.append(
                ActivationRecord(
                    ability_id=definition.id,
                    instance_id=instance.id,
                    ship_id=instance.ship_id,
                    player_id=instance.player_id,
                    turn_number=context.turn_number,
                    trigger=context.trigger,
                )
            )
        return result

    def has_effect(self, ship_id: str, effect_type: EffectType) -> bool:
        return any(effect.type is effect_type for effect in ship_effects(self._session, ship_id))

    def get_effect_magnitude(self, ship_id: str, effect_type: EffectType) -> float:
        """Strongest live magnitude of ``effect_type`` on a ship, 0.0 when absent."""
        return max(
            (
                effect.magnitude
                for effect in ship_effects(self._session, ship_id)
                if effect.type is effect_type
            ),
            default=0.0,
        )

    def player_effect_magnitude(
        self,
        player_id: str,
        effect_type: EffectType,
        ship_id: str | None = None,
    ) -> float:
        """Strongest magnitude across a player's afloat ships, or one ship when given."""
        if ship_id is not None:
            return self.get_effect_magnitude(ship_id, effect_type)
        return max(
            (
                self.get_effect_magnitude(ship.id, effect_type)
                for ship in self._session.ships_of(player_id)
                if not ship.is_sunk
            ),
            default=0.0,
        )

    def effects_for_ship(self, ship_id: str) -> list[ActiveEffect]:
        return list(ship_effects(self._session, ship_id))

    def consume_effect(
        self,
        player_id: str,
        effect_type: EffectType,
        ship_id: str | None = None,
    ) -> float:
        """Remove the strongest ``effect_type`` effect held by the player and return its magnitude."""
        best: tuple[AbilityInstance, ActiveEffect] | None = None
        ship_ids = [ship_id] if ship_id is not None else [s.id for s in self._session.ships_of(player_id)]
        for candidate_ship in ship_ids:
            for instance in self.instances_for_ship(candidate_ship):
                for effect in instance.active_effects:
                    if effect.type is effect_type and (best is None or effect.magnitude > best[1].magnitude):
                        best = (instance, effect)
        if best is None:
            return 0.0
        instance, effect = best
        instance.active_effects.remove(effect)
        logger.debug("effect_consumed ship=%s effect=%s", instance.ship_id, effect.id)
        return effect.magnitude

    def remove_effects(self, ship_id: str, effect_type: EffectType) -> int:
        return strip_effects(self._session, ship_id, effect_type)

    def clear_ship_effects(self, ship_id: str) -> None:
        for instance in self.instances_for_ship(ship_id):
            instance.active_effects.clear()

    def disable_ship(self, ship_id: str) -> None:
        """Deactivate every ability of a sunk ship and drop its effects."""
        for instance in self.instances_for_ship(ship_id):
            instance.is_active = False
            instance.active_effects.clear()

    def update_turn_end(self, player_id: str) -> list[ActiveEffect]:
        """Tick cooldowns and effect durations of one player's abilities."""
        expired: list[ActiveEffect] = []
        for instance in self.instances_for_player(player_id):
            expired.extend(lifecycle.update_turn_end(instance))
        if self._global_cooldowns.get(player_id, 0) > 0:
            self._global_cooldowns[player_id] -= 1
        return expired

    def activation_history(self, player_id: str | None = None) -> list[ActivationRecord]:
        if player_id is None:
            return list(self._history)
        return [record for record in self._history if record.player_id == player_id]

    def reset(self, session: GameSession | None = None) -> None:
        if session is not None:
            self._session = session
        self._history.clear()
        self._turn_counts.clear()
        self._global_cooldowns.clear()
