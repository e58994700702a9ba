"""Ability definitions, instances and effect records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from battlefleet.game.core.errors import ErrorCode, ValidationError
from battlefleet.game.core.models import Coord, ShipClass, ShipEra

if TYPE_CHECKING:
    from battlefleet.game.core.rules import GameSession
    from battlefleet.game.core.ship import Ship


class AbilityType(StrEnum):
    ACTIVE = "active"
    PASSIVE = "passive"
    TRIGGERED = "triggered"


class AbilityCategory(StrEnum):
    OFFENSIVE = "offensive"
    DEFENSIVE = "defensive"
    DETECTION = "detection"
    MOVEMENT = "movement"
    SUPPORT = "support"


class TargetType(StrEnum):
    SELF = "self"
    SINGLE_COORDINATE = "single_coordinate"
    AREA = "area"
    LINE = "line"
    SHIP = "ship"
    FLEET = "fleet"
    ENEMY_SHIP = "enemy_ship"
    ENEMY_FLEET = "enemy_fleet"


class Trigger(StrEnum):
    ON_ATTACK = "on_attack"
    ON_HIT = "on_hit"
    ON_DAMAGE = "on_damage"
    ON_TURN_START = "on_turn_start"
    ON_TURN_END = "on_turn_end"
    ON_SHIP_SUNK = "on_ship_sunk"


class EffectType(StrEnum):
    DAMAGE_BOOST = "damage_boost"
    ARMOR_PIERCING = "armor_piercing"
    REVEAL = "reveal"
    STEALTH = "stealth"
    DETECTION = "detection"
    MOVEMENT = "movement"


class AbilityState(StrEnum):
    """Lifecycle state of one ability instance."""

    READY = "ready"
    ON_COOLDOWN = "on_cooldown"
    EXHAUSTED = "exhausted"
    DISABLED = "disabled"


TARGETED_TYPES: frozenset[TargetType] = frozenset(
    {TargetType.SINGLE_COORDINATE, TargetType.AREA, TargetType.LINE}
)


@dataclass(frozen=True, slots=True)
class EffectSpec:
    """Static effect descriptor; ``duration`` None means no time decay."""

    type: EffectType
    magnitude: float
    duration: int | None = None
    radius: int = 0


@dataclass(frozen=True, slots=True)
class AbilityRequirements:
    ship_classes: frozenset[ShipClass] = frozenset()
    eras: frozenset[ShipEra] = frozenset()
    min_ship_size: int = 0

    def unmet_reason(self, ship_class: ShipClass, era: ShipEra, size: int) -> str | None:
        """Return why a ship does not qualify, or None when it does."""
        if self.ship_classes and ship_class not in self.ship_classes:
            return f"Requires ship class {', '.join(sorted(self.ship_classes))}."
        if self.eras and era not in self.eras:
            return f"Requires era {', '.join(sorted(self.eras))}."
        if size < self.min_ship_size:
            return f"Requires ship size {self.min_ship_size} or larger."
        return None


@dataclass(frozen=True, slots=True)
class AbilityDefinition:
    """Immutable ability template."""

    id: str
    name: str
    description: str
    type: AbilityType
    category: AbilityCategory
    target_type: TargetType
    requirements: AbilityRequirements
    cooldown_turns: int
    max_uses: int | None
    effects: tuple[EffectSpec, ...]
    triggers: tuple[Trigger, ...] = ()

    @property
    def requires_target(self) -> bool:
        return self.target_type in TARGETED_TYPES

    def effect(self, effect_type: EffectType) -> EffectSpec:
        for spec in self.effects:
            if spec.type is effect_type:
                return spec
        raise KeyError(f"{self.id} has no {effect_type} effect")


@dataclass(frozen=True, slots=True)
class EffectSource:
    ability_id: str
    ship_id: str
    player_id: str


@dataclass(frozen=True, slots=True)
class EffectTarget:
    coordinate: Coord | None = None
    area: tuple[Coord, ...] = ()
    ship_id: str | None = None


@dataclass(slots=True)
class ActiveEffect:
    """A live modifier produced by an ability activation."""

    id: str
    type: EffectType
    magnitude: float
    start_turn: int
    remaining_duration: int | None
    source: EffectSource
    target: EffectTarget | None = None

    @property
    def decays(self) -> bool:
        return self.remaining_duration is not None


@dataclass(slots=True)
class AbilityInstance:
    """Mutable per-ship ability state."""

    id: str
    definition_id: str
    ship_id: str
    player_id: str
    is_active: bool = True
    current_cooldown: int = 0
    remaining_uses: int | None = None
    active_effects: list[ActiveEffect] = field(default_factory=list)
    times_used: int = 0
    last_used_turn: int | None = None
    total_damage_dealt: int = 0

    def state(self, ship_sunk: bool = False) -> AbilityState:
        if ship_sunk or not self.is_active:
            return AbilityState.DISABLED
        if self.remaining_uses == 0:
            return AbilityState.EXHAUSTED
        if self.current_cooldown > 0:
            return AbilityState.ON_COOLDOWN
        return AbilityState.READY


@dataclass(slots=True)
class AbilityContext:
    """Everything an effect function may read while executing."""

    session: GameSession
    ship: Ship
    turn_number: int
    target: Coord | None = None
    trigger: Trigger | None = None
    damage_taken: int = 0


@dataclass(frozen=True, slots=True)
class AbilityValidation:
    can_activate: bool
    code: ErrorCode | None = None
    reason: str = ""
    cooldown_remaining: int = 0
    uses_remaining: int | None = None

    def as_error(self) -> ValidationError | None:
        if self.can_activate or self.code is None:
            return None
        return ValidationError(self.code, self.reason)


@dataclass(slots=True)
class AbilityExecutionResult:
    """Outcome of one activation attempt."""

    success: bool
    ability_id: str
    ship_id: str
    effects: list[ActiveEffect] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    coordinates_revealed: list[Coord] = field(default_factory=list)
    ships_detected: list[str] = field(default_factory=list)
    damage_dealt: int = 0

    @classmethod
    def rejected(cls, ability_id: str, ship_id: str, error: ValidationError) -> AbilityExecutionResult:
        return cls(success=False, ability_id=ability_id, ship_id=ship_id, errors=[error])
