import pytest

from battlefleet.game.app.battle import AITurnReport, Battle
from battlefleet.game.app.harness import (
    AITurn,
    Attack,
    AutoPlaceFleet,
    EndTurn,
    PlaceFleet,
    ScenarioHarness,
    StartBattle,
    UseAbility,
    build_battle,
    outcome_to_payload,
    parse_scenario,
    run_scenario,
)
from battlefleet.game.catalog.repository import FleetRepository
from battlefleet.game.catalog.schema import fleet_to_payload
from battlefleet.game.catalog.standard import SUBMARINE
from battlefleet.game.core.models import AttackKind, AttackPattern, Coord, Orientation
from battlefleet.game.infra.config import BattleSettings


@pytest.fixture
def scripted_payload(fleet_factory) -> dict[str, object]:
    home = fleet_to_payload("home", fleet_factory("p1"), 10, 10)["ships"]
    away = fleet_to_payload("away", fleet_factory("p2"), 10, 10)["ships"]
    return {
        "version": 1,
        "game_id": "scripted",
        "players": ["p1", "p2"],
        "seed": 3,
        "steps": [
            {"player": "p1", "action": "place_fleet", "ships": home},
            {"player": "p2", "action": "place_fleet", "ships": away},
            {"player": "p1", "action": "start"},
            {"player": "p1", "action": "attack", "target": [3, 3]},
            {"player": "p2", "action": "attack", "target": [9, 9]},
            {
                "player": "p1",
                "action": "ability",
                "ship": "p1_carrier",
                "ability": "air_scout",
                "target": [1, 1],
            },
            {"player": "p1", "action": "attack", "target": [3, 4], "kind": "area"},
            {"player": "p1", "action": "attack", "target": [0, 0]},
        ],
    }


def test_parse_scenario_builds_typed_steps(scripted_payload) -> None:
    scenario = parse_scenario(scripted_payload)
    assert scenario.game_id == "scripted"
    assert scenario.player_ids == ("p1", "p2")
    assert scenario.settings.seed == 3
    kinds = [type(action) for _, action in scenario.steps]
    assert kinds == [PlaceFleet, PlaceFleet, StartBattle, Attack, Attack, UseAbility, Attack, Attack]
    area = scenario.steps[6][1]
    assert area == Attack(Coord(3, 4), kind=AttackKind.AREA)


def test_parse_scenario_reads_settings_ai_and_catalog() -> None:
    payload = {
        "settings": {"max_turns": 30, "ai_difficulty": "expert"},
        "ai": {"player_2": "beginner"},
        "catalog": {
            "version": 1,
            "name": "extra",
            "ship_types": [{"type_id": "monitor", "class": "patrol_boat", "era": "fictional", "size": 2}],
        },
        "steps": [
            {"player": "player_1", "action": "auto_place", "ship_types": ["monitor", "submarine"]},
            {"player": "player_2", "action": "auto_place"},
            {
                "player": "player_1",
                "action": "attack",
                "target": [1, 2],
                "pattern": "line",
                "direction": "vertical",
            },
            {"player": "player_2", "action": "ai_turn"},
            {"player": "player_1", "action": "end_turn"},
        ],
    }
    scenario = parse_scenario(payload, BattleSettings(board_width=8))
    assert scenario.settings.board_width == 8
    assert scenario.settings.max_turns == 30
    assert scenario.ai_players == {"player_2": "beginner"}
    auto = scenario.steps[0][1]
    assert isinstance(auto, AutoPlaceFleet)
    assert [ship_type.type_id for ship_type in auto.ship_types] == ["monitor", "submarine"]
    assert auto.ship_types[1] is SUBMARINE
    line = scenario.steps[2][1]
    assert line == Attack(Coord(1, 2), pattern=AttackPattern.LINE, direction=Orientation.VERTICAL)
    assert isinstance(scenario.steps[3][1], AITurn)
    assert isinstance(scenario.steps[4][1], EndTurn)


@pytest.mark.parametrize(
    "payload",
    [
        {"version": 2},
        {"players": ["a", "b", "c"]},
        {"settings": {"fog_of_war": True}},
        {"ai": {"stranger": "expert"}},
        {"ai": {"player_2": "godlike"}},
        {"steps": [{"player": "player_1", "action": "dance"}]},
        {"steps": [{"player": "player_1", "action": "attack"}]},
        {"steps": [{"player": "player_1", "action": "attack", "target": [1]}]},
        {"steps": [{"player": "player_1", "action": "auto_place", "ship_types": ["yacht"]}]},
        {"steps": [{"action": "start"}]},
        {"steps": "start"},
    ],
)
def test_malformed_scenarios_are_rejected(payload) -> None:
    with pytest.raises(ValueError):
        parse_scenario(payload)


def test_run_scenario_reports_each_step(scripted_payload) -> None:
    outcomes = run_scenario(scripted_payload)
    assert [outcome.index for outcome in outcomes] == list(range(8))
    assert all(outcome.accepted for outcome in outcomes[:7])

    hit = outcome_to_payload(outcomes[3])
    assert hit["attack"]["outcome"] == "hit"
    assert hit["attack"]["ship_id"] == "p2_destroyer"

    scout = outcome_to_payload(outcomes[5])
    assert scout["ability"]["detected"] == ["p2_carrier", "p2_battleship"]

    area = outcome_to_payload(outcomes[6])
    assert area["attack"]["outcome"] == "sunk"
    assert len(area["attack"]["cells"]) == 9

    late = outcome_to_payload(outcomes[7])
    assert late["accepted"] is False
    assert late["errors"][0]["code"] == "NOT_YOUR_TURN"


def test_ai_turn_outcome_carries_strategy(fleet_factory) -> None:
    scenario = parse_scenario({"players": ["p1", "p2"], "ai": {"p2": "beginner"}, "seed": 11})
    battle = build_battle(scenario)
    battle.place_fleet("p1", fleet_factory("p1"))
    battle.auto_place_fleet("p2")
    battle.start("p2")
    outcomes = ScenarioHarness(battle).run([("p2", AITurn())])
    assert outcomes[0].accepted
    assert isinstance(outcomes[0].result, AITurnReport)
    payload = outcome_to_payload(outcomes[0])
    assert payload["strategy"] in {"hunt_target", "fallback"}
    assert "ability" not in payload


def test_harness_rejects_unknown_actions(battle: Battle) -> None:
    with pytest.raises(TypeError):
        ScenarioHarness(battle).run([("p1", object())])


def test_named_fleets_load_and_save_through_fleet_directory(tmp_path, fleet_factory) -> None:
    FleetRepository(tmp_path).save("Home Fleet", fleet_factory("p1"))
    payload = {
        "players": ["p1", "p2"],
        "seed": 3,
        "steps": [
            {"player": "p1", "action": "place_fleet", "fleet": "Home Fleet"},
            {"player": "p2", "action": "auto_place", "save_as": "Drill"},
            {"player": "p1", "action": "start"},
            {"player": "p1", "action": "attack", "target": [9, 9]},
        ],
    }
    scenario = parse_scenario(payload, fleet_dir=tmp_path)
    assert scenario.steps[0] == ("p1", PlaceFleet(tuple(fleet_factory("p1"))))
    assert scenario.steps[1] == ("p2", AutoPlaceFleet(save_as="Drill"))

    outcomes = run_scenario(payload, fleet_dir=tmp_path)
    assert all(outcome.accepted for outcome in outcomes)
    repo = FleetRepository(tmp_path)
    assert repo.names() == ["Drill", "Home Fleet"]
    assert [placement.ship_id for placement in repo.load("Drill")] == [
        "p2.carrier_1",
        "p2.battleship_2",
        "p2.heavy_cruiser_3",
        "p2.submarine_4",
        "p2.destroyer_5",
    ]


@pytest.mark.parametrize(
    "step",
    [
        {"player": "p1", "action": "place_fleet", "fleet": "Home Fleet"},
        {"player": "p1", "action": "auto_place", "save_as": "Drill"},
    ],
)
def test_named_fleet_steps_need_a_fleet_directory(step) -> None:
    with pytest.raises(ValueError, match="no fleet directory"):
        parse_scenario({"players": ["p1", "p2"], "steps": [step]})


def test_unknown_named_fleet_is_reported(tmp_path) -> None:
    step = {"player": "p1", "action": "place_fleet", "fleet": "Ghost Fleet"}
    with pytest.raises(FileNotFoundError):
        parse_scenario({"players": ["p1", "p2"], "steps": [step]}, fleet_dir=tmp_path)
