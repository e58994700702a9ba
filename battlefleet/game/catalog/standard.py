"""Built-in ship type catalog."""

from __future__ import annotations

from battlefleet.game.core.models import ShipClass, ShipEra, ShipType

CARRIER = ShipType("carrier", "Carrier", ShipClass.CARRIER, ShipEra.MODERN, 5, armor=1)
BATTLESHIP = ShipType(
    "battleship", "Battleship", ShipClass.BATTLESHIP, ShipEra.DREADNOUGHT, 4, armor=2, firepower=2
)
HEAVY_CRUISER = ShipType(
    "heavy_cruiser", "Heavy Cruiser", ShipClass.HEAVY_CRUISER, ShipEra.MODERN, 3, armor=1
)
SUBMARINE = ShipType("submarine", "Submarine", ShipClass.SUBMARINE, ShipEra.MODERN, 3)
DESTROYER = ShipType("destroyer", "Destroyer", ShipClass.DESTROYER, ShipEra.MODERN, 2)

SUPER_DREADNOUGHT = ShipType(
    "super_dreadnought",
    "Super-Dreadnought",
    ShipClass.BATTLESHIP,
    ShipEra.SUPER_DREADNOUGHT,
    5,
    armor=3,
    firepower=3,
)
BATTLECRUISER = ShipType(
    "battlecruiser",
    "Battlecruiser",
    ShipClass.BATTLECRUISER,
    ShipEra.BATTLECRUISER,
    4,
    armor=1,
    firepower=2,
)

# Sizes line up with STANDARD_FLEET_SIZES.
STANDARD_FLEET: tuple[ShipType, ...] = (CARRIER, BATTLESHIP, HEAVY_CRUISER, SUBMARINE, DESTROYER)
HISTORICAL_FLEET: tuple[ShipType, ...] = (
    SUPER_DREADNOUGHT,
    BATTLECRUISER,
    HEAVY_CRUISER,
    SUBMARINE,
    DESTROYER,
)

STANDARD_SHIP_TYPES: dict[str, ShipType] = {
    ship_type.type_id: ship_type
    for ship_type in (*STANDARD_FLEET, SUPER_DREADNOUGHT, BATTLECRUISER)
}


def fleet_named(name: str) -> tuple[ShipType, ...]:
    """Return a built-in fleet composition by name."""
    fleets = {"standard": STANDARD_FLEET, "historical": HISTORICAL_FLEET}
    try:
        return fleets[name.strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown fleet '{name}'. Expected one of: {', '.join(fleets)}.") from exc
