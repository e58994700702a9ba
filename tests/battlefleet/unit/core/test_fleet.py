import pytest

from battlefleet.game.catalog.standard import CARRIER, DESTROYER
from battlefleet.game.core.board import Board
from battlefleet.game.core.errors import ErrorCode
from battlefleet.game.core.fleet import build_fleet, validate_fleet
from battlefleet.game.core.models import Coord, Orientation, ShipPlacement


def _destroyer(ship_id: str, bow: Coord, orientation: Orientation = Orientation.HORIZONTAL) -> ShipPlacement:
    return ShipPlacement(ship_id, DESTROYER, bow, orientation)


def test_validate_fleet_rejects_empty_duplicate_overlap_and_oob() -> None:
    board = Board()
    assert validate_fleet([], board).codes == (ErrorCode.INVALID_PLACEMENT,)

    duplicate = validate_fleet([_destroyer("a", Coord(0, 0)), _destroyer("a", Coord(0, 5))], board)
    assert not duplicate.is_valid

    overlap = validate_fleet([_destroyer("a", Coord(0, 0)), _destroyer("b", Coord(1, 0))], board)
    assert [error.field for error in overlap.errors] == ["b"]

    outside = validate_fleet([ShipPlacement("c", CARRIER, Coord(7, 0), Orientation.HORIZONTAL)], board)
    assert outside.errors[0].field == "c"


def test_validate_fleet_warns_on_extra_ships_and_fails_on_missing() -> None:
    board = Board()
    fleet = [_destroyer("a", Coord(0, 0)), _destroyer("b", Coord(0, 2)), _destroyer("c", Coord(0, 4))]
    extra = validate_fleet(fleet, board, required_ships=2)
    assert extra.is_valid
    assert extra.warnings == ("More ships placed than required (3 > 2).",)
    missing = validate_fleet(fleet, board, required_ships=5)
    assert not missing.is_valid


def test_build_fleet_places_ships_and_raises_on_invalid() -> None:
    board = Board()
    ships = build_fleet("p1", [_destroyer("a", Coord(3, 3), Orientation.VERTICAL)], board)
    assert [ship.id for ship in ships] == ["a"]
    assert ships[0].cells == (Coord(3, 3), Coord(3, 4))
    assert board.ship_at(Coord(3, 4)) == "a"
    with pytest.raises(ValueError):
        build_fleet("p1", [_destroyer("b", Coord(3, 3))], board)
