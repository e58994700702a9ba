"""Built-in ability templates and class/era eligibility maps."""

from __future__ import annotations

from battlefleet.game.abilities.models import (
    AbilityCategory,
    AbilityDefinition,
    AbilityRequirements,
    AbilityType,
    EffectSpec,
    EffectType,
    TargetType,
    Trigger,
)
from battlefleet.game.core.models import ShipClass, ShipEra

ALL_BIG_GUNS = AbilityDefinition(
    id="all_big_guns",
    name="All Big Guns",
    description="Concentrated main battery fire boosts the next attack by 50%.",
    type=AbilityType.ACTIVE,
    category=AbilityCategory.OFFENSIVE,
    target_type=TargetType.SELF,
    requirements=AbilityRequirements(
        ship_classes=frozenset({ShipClass.BATTLESHIP, ShipClass.BATTLECRUISER}),
        eras=frozenset({ShipEra.DREADNOUGHT, ShipEra.SUPER_DREADNOUGHT, ShipEra.BATTLECRUISER}),
        min_ship_size=4,
    ),
    cooldown_turns=3,
    max_uses=2,
    effects=(EffectSpec(EffectType.DAMAGE_BOOST, 1.5),),
)

ARMOR_PIERCING = AbilityDefinition(
    id="armor_piercing",
    name="Armor-Piercing Shells",
    description="Heavy shells ignore 3 points of target armor for 2 turns.",
    type=AbilityType.ACTIVE,
    category=AbilityCategory.OFFENSIVE,
    target_type=TargetType.SELF,
    requirements=AbilityRequirements(
        ship_classes=frozenset({ShipClass.BATTLESHIP}),
        eras=frozenset({ShipEra.SUPER_DREADNOUGHT}),
        min_ship_size=5,
    ),
    cooldown_turns=4,
    max_uses=3,
    effects=(EffectSpec(EffectType.ARMOR_PIERCING, 3, duration=2),),
)

AIR_SCOUT = AbilityDefinition(
    id="air_scout",
    name="Air Scout",
    description="Reconnaissance aircraft reveal a 3x3 area for 3 turns.",
    type=AbilityType.ACTIVE,
    category=AbilityCategory.DETECTION,
    target_type=TargetType.AREA,
    requirements=AbilityRequirements(
        ship_classes=frozenset({ShipClass.CARRIER}),
        eras=frozenset({ShipEra.MODERN}),
    ),
    cooldown_turns=4,
    max_uses=3,
    effects=(EffectSpec(EffectType.REVEAL, 1, duration=3, radius=1),),
)

SILENT_RUNNING = AbilityDefinition(
    id="silent_running",
    name="Silent Running",
    description="The submarine cannot be targeted by area fire until it attacks or is detected.",
    type=AbilityType.PASSIVE,
    category=AbilityCategory.DEFENSIVE,
    target_type=TargetType.SELF,
    requirements=AbilityRequirements(
        ship_classes=frozenset({ShipClass.SUBMARINE}),
        eras=frozenset({ShipEra.SUPER_DREADNOUGHT, ShipEra.MODERN}),
    ),
    cooldown_turns=0,
    max_uses=None,
    effects=(EffectSpec(EffectType.STEALTH, 100),),
)

SONAR_PING = AbilityDefinition(
    id="sonar_ping",
    name="Sonar Ping",
    description="Active sonar reveals ships in a 5x5 area and exposes submerged submarines.",
    type=AbilityType.ACTIVE,
    category=AbilityCategory.DETECTION,
    target_type=TargetType.AREA,
    requirements=AbilityRequirements(
        ship_classes=frozenset({ShipClass.DESTROYER, ShipClass.FRIGATE, ShipClass.HEAVY_CRUISER}),
        eras=frozenset({ShipEra.MODERN}),
    ),
    cooldown_turns=3,
    max_uses=4,
    effects=(EffectSpec(EffectType.DETECTION, 150, duration=2, radius=2),),
)

SPEED_ADVANTAGE = AbilityDefinition(
    id="speed_advantage",
    name="Speed Advantage",
    description="After taking damage the ship may reposition up to 2 cells on its next turn.",
    type=AbilityType.TRIGGERED,
    category=AbilityCategory.MOVEMENT,
    target_type=TargetType.SELF,
    requirements=AbilityRequirements(
        ship_classes=frozenset({ShipClass.BATTLECRUISER}),
        eras=frozenset({ShipEra.DREADNOUGHT, ShipEra.SUPER_DREADNOUGHT, ShipEra.BATTLECRUISER}),
    ),
    cooldown_turns=2,
    max_uses=3,
    effects=(EffectSpec(EffectType.MOVEMENT, 2, duration=1),),
    triggers=(Trigger.ON_DAMAGE,),
)

DEFAULT_DEFINITIONS: tuple[AbilityDefinition, ...] = (
    ALL_BIG_GUNS,
    ARMOR_PIERCING,
    AIR_SCOUT,
    SILENT_RUNNING,
    SONAR_PING,
    SPEED_ADVANTAGE,
)

CLASS_ABILITIES: dict[ShipClass, tuple[str, ...]] = {
    ShipClass.BATTLESHIP: ("all_big_guns", "armor_piercing"),
    ShipClass.BATTLECRUISER: ("speed_advantage", "all_big_guns"),
    ShipClass.CARRIER: ("air_scout",),
    ShipClass.SUBMARINE: ("silent_running",),
    ShipClass.DESTROYER: ("sonar_ping",),
    ShipClass.FRIGATE: ("sonar_ping",),
    ShipClass.HEAVY_CRUISER: ("sonar_ping",),
}

ERA_ABILITIES: dict[ShipEra, tuple[str, ...]] = {
    ShipEra.DREADNOUGHT: ("all_big_guns", "speed_advantage"),
    ShipEra.SUPER_DREADNOUGHT: ("all_big_guns", "armor_piercing", "speed_advantage", "silent_running"),
    ShipEra.BATTLECRUISER: ("speed_advantage", "all_big_guns"),
    ShipEra.MODERN: ("air_scout", "sonar_ping", "silent_running"),
}
