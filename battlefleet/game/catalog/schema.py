"""Ship catalog and fleet payload schema and validation helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from battlefleet.game.core.models import (
    Coord,
    Orientation,
    ShipClass,
    ShipEra,
    ShipPlacement,
    ShipType,
)

SCHEMA_VERSION = 1


def ship_type_to_payload(ship_type: ShipType) -> dict[str, object]:
    payload: dict[str, object] = {
        "type_id": ship_type.type_id,
        "name": ship_type.name,
        "class": ship_type.ship_class.value,
        "era": ship_type.era.value,
        "size": ship_type.size,
        "armor": ship_type.armor,
        "firepower": ship_type.firepower,
    }
    if ship_type.hit_points is not None:
        payload["hit_points"] = ship_type.hit_points
    if ship_type.ability_ids:
        payload["abilities"] = list(ship_type.ability_ids)
    return payload


def payload_to_ship_type(item: object) -> ShipType:
    """Convert one catalog entry into a ship type."""
    if not isinstance(item, dict):
        raise ValueError("Each catalog entry must be an object.")
    try:
        type_id = str(item["type_id"]).strip()
        ship_type = ShipType(
            type_id=type_id,
            name=str(item.get("name", type_id)),
            ship_class=ShipClass(str(item["class"])),
            era=ShipEra(str(item["era"])),
            size=int(item["size"]),
            hit_points=int(item["hit_points"]) if item.get("hit_points") is not None else None,
            armor=int(item.get("armor", 0)),
            firepower=int(item.get("firepower", 1)),
            ability_ids=tuple(str(ability) for ability in item.get("abilities", ())),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError("Malformed ship type entry in catalog payload.") from exc
    if not type_id:
        raise ValueError("Ship type id is required.")
    if ship_type.size < 1:
        raise ValueError(f"Ship type '{type_id}' must have a positive size.")
    if ship_type.max_hit_points < 1:
        raise ValueError(f"Ship type '{type_id}' must have positive hit points.")
    if ship_type.armor < 0:
        raise ValueError(f"Ship type '{type_id}' cannot have negative armor.")
    return ship_type


def catalog_to_payload(name: str, ship_types: Sequence[ShipType]) -> dict[str, object]:
    return {
        "version": SCHEMA_VERSION,
        "name": name,
        "ship_types": [ship_type_to_payload(ship_type) for ship_type in ship_types],
    }


def payload_to_catalog(payload: dict[str, object]) -> tuple[str, dict[str, ShipType]]:
    """Convert a loaded catalog payload into ship types keyed by id."""
    _check_version(payload)
    name = str(payload.get("name", "")).strip()
    if not name:
        raise ValueError("Catalog name is required.")
    raw_types = payload.get("ship_types")
    if not isinstance(raw_types, list):
        raise ValueError("Catalog ship_types must be a list.")
    catalog: dict[str, ShipType] = {}
    for item in raw_types:
        ship_type = payload_to_ship_type(item)
        if ship_type.type_id in catalog:
            raise ValueError(f"Duplicate ship type id: {ship_type.type_id}.")
        catalog[ship_type.type_id] = ship_type
    return name, catalog


def fleet_to_payload(
    name: str,
    placements: Sequence[ShipPlacement],
    width: int,
    height: int,
) -> dict[str, object]:
    """Convert fleet placement to JSON-serializable payload."""
    return {
        "version": SCHEMA_VERSION,
        "name": name,
        "board": [width, height],
        "ships": [placement_to_payload(placement) for placement in placements],
    }


def placement_to_payload(placement: ShipPlacement) -> dict[str, object]:
    return {
        "id": placement.ship_id,
        "type": placement.ship_type.type_id,
        "bow": [placement.bow.x, placement.bow.y],
        "orientation": placement.orientation.value,
    }


def payload_to_placements(
    raw_ships: object,
    catalog: Mapping[str, ShipType],
) -> list[ShipPlacement]:
    """Convert a list of ship entries into placements using ``catalog`` types."""
    if not isinstance(raw_ships, list):
        raise ValueError("Fleet ships must be a list.")
    placements: list[ShipPlacement] = []
    for index, item in enumerate(raw_ships):
        if not isinstance(item, dict):
            raise ValueError("Each fleet ship must be an object.")
        try:
            type_id = str(item["type"])
            bow = item["bow"]
            if not isinstance(bow, list) or len(bow) != 2:
                raise ValueError("Ship bow must be a 2-item list.")
            x, y = int(bow[0]), int(bow[1])
            orientation = Orientation(str(item.get("orientation", Orientation.HORIZONTAL.value)))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("Malformed ship entry in fleet payload.") from exc
        ship_type = catalog.get(type_id)
        if ship_type is None:
            raise ValueError(f"Unknown ship type '{type_id}'.")
        ship_id = str(item.get("id") or f"{type_id}_{index + 1}")
        placements.append(ShipPlacement(ship_id, ship_type, Coord(x, y), orientation))
    return placements


def payload_to_fleet(
    payload: dict[str, object],
    catalog: Mapping[str, ShipType],
) -> tuple[str, list[ShipPlacement]]:
    """Convert loaded payload into fleet placement."""
    _check_version(payload)
    name = str(payload.get("name", "")).strip()
    if not name:
        raise ValueError("Fleet name is required.")
    return name, payload_to_placements(payload.get("ships"), catalog)


def _check_version(payload: dict[str, object]) -> None:
    raw_version = payload.get("version", -1)
    if not isinstance(raw_version, (int, str)):
        raise ValueError("Payload version must be int-compatible.")
    try:
        version = int(raw_version)
    except ValueError as exc:
        raise ValueError("Payload version must be int-compatible.") from exc
    if version != SCHEMA_VERSION:
        raise ValueError("Unsupported payload version.")
