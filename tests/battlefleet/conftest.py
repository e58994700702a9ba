from __future__ import annotations

import random

import pytest

from battlefleet.game.app.battle import Battle
from battlefleet.game.catalog.standard import BATTLESHIP, CARRIER, DESTROYER, HEAVY_CRUISER, SUBMARINE
from battlefleet.game.core.models import Coord, Orientation, ShipPlacement


def make_fleet(player_id: str) -> list[ShipPlacement]:
    # Destroyer sits on (3,3)-(3,4); (5,5) and (9,9) are open water.
    return [
        ShipPlacement(f"{player_id}_carrier", CARRIER, Coord(0, 0), Orientation.HORIZONTAL),
        ShipPlacement(f"{player_id}_battleship", BATTLESHIP, Coord(0, 2), Orientation.HORIZONTAL),
        ShipPlacement(f"{player_id}_cruiser", HEAVY_CRUISER, Coord(6, 6), Orientation.VERTICAL),
        ShipPlacement(f"{player_id}_submarine", SUBMARINE, Coord(8, 0), Orientation.VERTICAL),
        ShipPlacement(f"{player_id}_destroyer", DESTROYER, Coord(3, 3), Orientation.VERTICAL),
    ]


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def fleet_factory():
    return make_fleet


@pytest.fixture
def battle(seeded_rng: random.Random) -> Battle:
    return Battle("game-1", ("p1", "p2"), rng=seeded_rng)


@pytest.fixture
def ready_battle(battle: Battle) -> Battle:
    assert battle.place_fleet("p1", make_fleet("p1")).is_valid
    assert battle.place_fleet("p2", make_fleet("p2")).is_valid
    assert battle.start("p1").is_valid
    return battle
