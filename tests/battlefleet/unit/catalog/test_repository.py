import json

import pytest

from battlefleet.game.catalog.repository import FleetRepository
from battlefleet.game.catalog.schema import fleet_to_payload
from battlefleet.game.catalog.standard import DESTROYER, STANDARD_SHIP_TYPES
from battlefleet.game.core.models import Coord, Orientation, ShipPlacement


def test_repository_save_list_load_delete(tmp_path, fleet_factory) -> None:
    repo = FleetRepository(tmp_path)
    fleet = fleet_factory("p1")
    path = repo.save("Home Fleet", fleet)
    assert path.name == "Home_Fleet.json"
    assert repo.names() == ["Home Fleet"]
    assert repo.load("Home Fleet") == fleet
    assert repo.delete("Home Fleet")
    assert repo.names() == []
    assert not repo.delete("Home Fleet")


def test_saving_same_name_overwrites_in_place(tmp_path, fleet_factory) -> None:
    repo = FleetRepository(tmp_path)
    first = repo.save("Home Fleet", fleet_factory("p1"))
    second = repo.save("Home Fleet", fleet_factory("p1")[:2])
    assert first == second
    assert len(repo.load("Home Fleet")) == 2


def test_colliding_names_get_numbered_files(tmp_path, fleet_factory) -> None:
    repo = FleetRepository(tmp_path)
    repo.save("a b", fleet_factory("p1"))
    second = repo.save("a/b", fleet_factory("p1"))
    assert second.name == "a_b_2.json"
    assert repo.names() == ["a b", "a/b"]
    assert len(repo.load("a/b")) == 5


def test_illegal_layouts_are_refused_on_save(tmp_path) -> None:
    repo = FleetRepository(tmp_path)
    overlapping = [
        ShipPlacement("d1", DESTROYER, Coord(0, 0), Orientation.HORIZONTAL),
        ShipPlacement("d2", DESTROYER, Coord(1, 0), Orientation.VERTICAL),
    ]
    with pytest.raises(ValueError, match="not a legal layout"):
        repo.save("Clash", overlapping)
    assert repo.names() == []


def test_load_checks_board_size_and_layout(tmp_path, fleet_factory) -> None:
    FleetRepository(tmp_path, 12, 12).save("Wide", fleet_factory("p1"))
    with pytest.raises(ValueError, match="laid out for board"):
        FleetRepository(tmp_path).load("Wide")

    payload = fleet_to_payload("Stacked", fleet_factory("p1"), 10, 10)
    payload["ships"][1]["bow"] = [0, 0]
    (tmp_path / "stacked.json").write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ValueError, match="not a legal layout"):
        FleetRepository(tmp_path).load("Stacked")


def test_load_resolves_types_through_catalog(tmp_path, fleet_factory) -> None:
    repo = FleetRepository(tmp_path)
    repo.save("Home Fleet", fleet_factory("p1"))
    with pytest.raises(ValueError, match="Unknown ship type"):
        repo.load("Home Fleet", {"carrier": STANDARD_SHIP_TYPES["carrier"]})


def test_missing_and_blank_names(tmp_path) -> None:
    repo = FleetRepository(tmp_path)
    with pytest.raises(FileNotFoundError):
        repo.load("missing")
    with pytest.raises(ValueError):
        repo.save("   ", [])


def test_unreadable_files_are_listed_by_stem_but_not_loaded(tmp_path) -> None:
    (tmp_path / "broken.json").write_text("{invalid", encoding="utf-8")
    (tmp_path / "listed.json").write_text("[1, 2]", encoding="utf-8")
    repo = FleetRepository(tmp_path)
    assert repo.names() == ["broken", "listed"]
    with pytest.raises(ValueError, match="not a readable fleet file"):
        repo.load("broken")
