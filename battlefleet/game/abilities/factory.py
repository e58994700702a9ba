"""Ability registry and per-ship instantiation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from battlefleet.game.abilities.definitions import CLASS_ABILITIES, DEFAULT_DEFINITIONS, ERA_ABILITIES
from battlefleet.game.abilities.effects import ABILITY_BEHAVIORS, AbilityBehavior
from battlefleet.game.abilities.models import AbilityDefinition, AbilityInstance
from battlefleet.game.core.errors import ConfigurationError
from battlefleet.game.core.models import ShipClass, ShipEra
from battlefleet.game.core.ship import Ship

logger = logging.getLogger(__name__)

DEFAULT_MAX_ABILITIES_PER_SHIP = 2


class AbilityFactory:
    """Owns ability definitions, effect behaviours and eligibility maps.

    Built once per battle and passed by reference. Every registered
    definition must have a behaviour and every map entry must name a known
    definition, otherwise construction fails with ``ConfigurationError``.
    """

    def __init__(
        self,
        definitions: Iterable[AbilityDefinition] = DEFAULT_DEFINITIONS,
        behaviors: Mapping[str, AbilityBehavior] = ABILITY_BEHAVIORS,
        class_abilities: Mapping[ShipClass, tuple[str, ...]] = CLASS_ABILITIES,
        era_abilities: Mapping[ShipEra, tuple[str, ...]] = ERA_ABILITIES,
        max_abilities_per_ship: int = DEFAULT_MAX_ABILITIES_PER_SHIP,
    ) -> None:
        if max_abilities_per_ship < 0:
            raise ConfigurationError("max_abilities_per_ship must be non-negative.")
        self._definitions: dict[str, AbilityDefinition] = {}
        for definition in definitions:
            if definition.id in self._definitions:
                raise ConfigurationError(f"Duplicate ability definition: {definition.id}.")
            if definition.id not in behaviors:
                raise ConfigurationError(f"Ability '{definition.id}' has no registered implementation.")
            if definition.cooldown_turns < 0:
                raise ConfigurationError(f"Ability '{definition.id}' has a negative cooldown.")
            self._definitions[definition.id] = definition
        self._behaviors = dict(behaviors)
        self._class_abilities = {
            ship_class: self._checked_ids(ids, f"class {ship_class}")
            for ship_class, ids in class_abilities.items()
        }
        self._era_abilities = {
            era: self._checked_ids(ids, f"era {era}") for era, ids in era_abilities.items()
        }
        self._max_abilities_per_ship = max_abilities_per_ship

    def _checked_ids(self, ids: Iterable[str], owner: str) -> tuple[str, ...]:
        checked = tuple(ids)
        for ability_id in checked:
            if ability_id not in self._definitions:
                raise ConfigurationError(f"Registry for {owner} references unknown ability '{ability_id}'.")
        return checked

    @property
    def max_abilities_per_ship(self) -> int:
        return self._max_abilities_per_ship

    def definitions(self) -> list[AbilityDefinition]:
        return list(self._definitions.values())

    def get_definition(self, ability_id: str) -> AbilityDefinition | None:
        return self._definitions.get(ability_id)

    def behavior(self, ability_id: str) -> AbilityBehavior:
        return self._behaviors[ability_id]

    def abilities_for_class(self, ship_class: ShipClass) -> list[AbilityDefinition]:
        return [self._definitions[ability_id] for ability_id in self._class_abilities.get(ship_class, ())]

    def abilities_for_era(self, era: ShipEra) -> list[AbilityDefinition]:
        return [self._definitions[ability_id] for ability_id in self._era_abilities.get(era, ())]

    def eligible_ability_ids(self, ship: Ship) -> list[str]:
        """Ability ids a ship qualifies for, in registry order, capped per ship.

        Explicit ``ShipType.ability_ids`` replace the class map as candidates;
        the era map and the definition requirements still apply.
        """
        candidates = ship.ship_type.ability_ids or self._class_abilities.get(ship.ship_class, ())
        era_ids = set(self._era_abilities.get(ship.era, ()))
        eligible: list[str] = []
        for ability_id in candidates:
            definition = self._definitions.get(ability_id)
            if definition is None:
                raise ConfigurationError(
                    f"Ship type '{ship.ship_type.type_id}' references unknown ability '{ability_id}'."
                )
            if ability_id not in era_ids or ability_id in eligible:
                continue
            if definition.requirements.unmet_reason(ship.ship_class, ship.era, ship.size) is not None:
                continue
            eligible.append(ability_id)
        return eligible[: self._max_abilities_per_ship]

    def create_instance(self, ability_id: str, ship: Ship) -> AbilityInstance:
        definition = self._definitions.get(ability_id)
        if definition is None:
            raise ConfigurationError(f"Unknown ability '{ability_id}'.")
        return AbilityInstance(
            id=f"{ship.id}:{ability_id}",
            definition_id=ability_id,
            ship_id=ship.id,
            player_id=ship.player_id,
            remaining_uses=definition.max_uses,
        )

    def create_abilities_for_ship(self, ship: Ship) -> list[AbilityInstance]:
        instances = [self.create_instance(ability_id, ship) for ability_id in self.eligible_ability_ids(ship)]
        logger.debug(
            "abilities_created ship=%s abilities=%s",
            ship.id,
            ",".join(instance.definition_id for instance in instances),
        )
        return instances
