"""Scenario harness: replay ordered (player_id, action) pairs against a battle."""

from __future__ import annotations

import dataclasses
import logging
import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from battlefleet.game.abilities.models import AbilityExecutionResult
from battlefleet.game.ai.context import PlacementAction
from battlefleet.game.ai.difficulty import resolve_difficulty
from battlefleet.game.app.battle import AITurnReport, Battle
from battlefleet.game.catalog.repository import FleetRepository
from battlefleet.game.catalog.schema import payload_to_catalog, payload_to_placements
from battlefleet.game.catalog.standard import STANDARD_FLEET, STANDARD_SHIP_TYPES
from battlefleet.game.combat.resolver import AttackResult
from battlefleet.game.combat.validator import AttackRequest
from battlefleet.game.core.errors import ValidationError, ValidationResult
from battlefleet.game.core.models import (
    AttackKind,
    AttackPattern,
    Coord,
    Orientation,
    ShipPlacement,
    ShipType,
)
from battlefleet.game.infra.config import BattleSettings

logger = logging.getLogger(__name__)

SCENARIO_VERSION = 1


@dataclass(frozen=True, slots=True)
class PlaceFleet:
    placements: tuple[ShipPlacement, ...]


@dataclass(frozen=True, slots=True)
class AutoPlaceFleet:
    ship_types: tuple[ShipType, ...] = STANDARD_FLEET
    save_as: str | None = None


@dataclass(frozen=True, slots=True)
class StartBattle:
    pass


@dataclass(frozen=True, slots=True)
class Attack:
    target: Coord
    kind: AttackKind = AttackKind.NORMAL
    pattern: AttackPattern = AttackPattern.SINGLE
    direction: Orientation = Orientation.HORIZONTAL
    firing_ship_id: str | None = None
    elapsed_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class UseAbility:
    ship_id: str
    ability_id: str
    target: Coord | None = None
    elapsed_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class EndTurn:
    pass


@dataclass(frozen=True, slots=True)
class AITurn:
    pass


HarnessAction = PlaceFleet | AutoPlaceFleet | StartBattle | Attack | UseAbility | EndTurn | AITurn
Step = tuple[str, HarnessAction]


@dataclass(frozen=True, slots=True)
class HarnessOutcome:
    """Result of one replayed step, in submission order."""

    index: int
    player_id: str
    action: str
    accepted: bool
    result: Any
    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(slots=True)
class Scenario:
    game_id: str
    player_ids: tuple[str, str]
    settings: BattleSettings
    ai_players: dict[str, str] = field(default_factory=dict)
    steps: list[Step] = field(default_factory=list)
    fleets: FleetRepository | None = None


class ScenarioHarness:
    """Drives a battle from an ordered list of steps and collects every outcome."""

    def __init__(self, battle: Battle, fleets: FleetRepository | None = None) -> None:
        self._battle = battle
        self._fleets = fleets

    @property
    def battle(self) -> Battle:
        return self._battle

    def run(self, steps: Iterable[Step]) -> list[HarnessOutcome]:
        outcomes: list[HarnessOutcome] = []
        for index, (player_id, action) in enumerate(steps):
            outcome = self._apply(index, player_id, action)
            logger.debug(
                "harness_step index=%s player=%s action=%s accepted=%s",
                index,
                player_id,
                outcome.action,
                outcome.accepted,
            )
            outcomes.append(outcome)
        return outcomes

    def _apply(self, index: int, player_id: str, action: HarnessAction) -> HarnessOutcome:
        battle = self._battle
        if isinstance(action, PlaceFleet):
            verdict = battle.place_fleet(player_id, action.placements)
            return _from_validation(index, player_id, "place_fleet", verdict)
        if isinstance(action, AutoPlaceFleet):
            decision, verdict = battle.auto_place_fleet(player_id, action.ship_types)
            placed = decision.action if isinstance(decision.action, PlacementAction) else None
            if verdict.is_valid and placed is not None and action.save_as and self._fleets is not None:
                self._fleets.save(action.save_as, placed.placements)
            return HarnessOutcome(
                index,
                player_id,
                "auto_place",
                verdict.is_valid,
                decision,
                verdict.errors,
                verdict.warnings,
            )
        if isinstance(action, StartBattle):
            return _from_validation(index, player_id, "start", battle.start(player_id))
        if isinstance(action, Attack):
            result = battle.attack(
                AttackRequest(
                    player_id=player_id,
                    target=action.target,
                    kind=action.kind,
                    pattern=action.pattern,
                    direction=action.direction,
                    firing_ship_id=action.firing_ship_id,
                    elapsed_seconds=action.elapsed_seconds,
                )
            )
            return _from_attack(index, player_id, "attack", result)
        if isinstance(action, UseAbility):
            executed = battle.use_ability(
                player_id,
                action.ship_id,
                action.ability_id,
                action.target,
                elapsed_seconds=action.elapsed_seconds,
            )
            return _from_ability(index, player_id, "ability", executed)
        if isinstance(action, EndTurn):
            return _from_validation(index, player_id, "end_turn", battle.end_turn(player_id))
        if isinstance(action, AITurn):
            report = battle.play_ai_turn(player_id)
            errors: list[ValidationError] = []
            warnings: list[str] = []
            if report.attack_result is not None:
                errors.extend(report.attack_result.errors)
                warnings.extend(report.attack_result.warnings)
            accepted = report.attack_result is not None and report.attack_result.accepted
            return HarnessOutcome(
                index, player_id, "ai_turn", accepted, report, tuple(errors), tuple(warnings)
            )
        raise TypeError(f"Unsupported harness action: {type(action).__name__}")


def _from_validation(index: int, player_id: str, name: str, verdict: ValidationResult) -> HarnessOutcome:
    return HarnessOutcome(index, player_id, name, verdict.is_valid, verdict, verdict.errors, verdict.warnings)


def _from_attack(index: int, player_id: str, name: str, result: AttackResult) -> HarnessOutcome:
    return HarnessOutcome(
        index, player_id, name, result.accepted, result, tuple(result.errors), tuple(result.warnings)
    )


def _from_ability(index: int, player_id: str, name: str, result: AbilityExecutionResult) -> HarnessOutcome:
    return HarnessOutcome(index, player_id, name, result.success, result, tuple(result.errors))


def build_battle(scenario: Scenario, *, rng: random.Random | None = None) -> Battle:
    """Create the battle a scenario runs against and seat its AI players."""
    battle = Battle(
        scenario.game_id,
        scenario.player_ids,
        scenario.settings,
        rng=rng or random.Random(scenario.settings.seed),
    )
    for player_id, difficulty in scenario.ai_players.items():
        battle.add_ai(player_id, difficulty)
    return battle


def parse_scenario(
    payload: Mapping[str, Any],
    base: BattleSettings | None = None,
    fleet_dir: Path | None = None,
) -> Scenario:
    """Convert a loaded scenario payload into a runnable scenario.

    With ``fleet_dir`` set, steps can place a saved fleet by name and store
    auto-placed fleets under a name.
    """
    raw_version = payload.get("version", SCENARIO_VERSION)
    if not isinstance(raw_version, (int, str)) or int(raw_version) != SCENARIO_VERSION:
        raise ValueError("Unsupported scenario version.")
    players = payload.get("players", ["player_1", "player_2"])
    if not isinstance(players, list) or len(players) != 2:
        raise ValueError("Scenario players must be a list of two ids.")
    player_ids = (str(players[0]), str(players[1]))

    settings = _settings_from_payload(payload.get("settings", {}), base or BattleSettings())
    if payload.get("seed") is not None:
        settings = dataclasses.replace(settings, seed=int(payload["seed"]))

    catalog: dict[str, ShipType] = dict(STANDARD_SHIP_TYPES)
    if payload.get("catalog") is not None:
        raw_catalog = payload["catalog"]
        if not isinstance(raw_catalog, dict):
            raise ValueError("Scenario catalog must be an object.")
        catalog.update(payload_to_catalog(raw_catalog)[1])

    raw_ai = payload.get("ai", {})
    if not isinstance(raw_ai, dict):
        raise ValueError("Scenario ai must map player ids to difficulties.")
    ai_players = {str(player): resolve_difficulty(str(level)).value for player, level in raw_ai.items()}
    for player_id in ai_players:
        if player_id not in player_ids:
            raise ValueError(f"AI seat '{player_id}' is not a scenario player.")

    raw_steps = payload.get("steps", [])
    if not isinstance(raw_steps, list):
        raise ValueError("Scenario steps must be a list.")
    fleets = FleetRepository(fleet_dir, settings.board_width, settings.board_height) if fleet_dir else None
    steps = [_parse_step(item, catalog, fleets) for item in raw_steps]
    return Scenario(
        game_id=str(payload.get("game_id", "scenario")),
        player_ids=player_ids,
        settings=settings,
        ai_players=ai_players,
        steps=steps,
        fleets=fleets,
    )


def _settings_from_payload(raw: object, base: BattleSettings) -> BattleSettings:
    if not isinstance(raw, dict):
        raise ValueError("Scenario settings must be an object.")
    known = {item.name for item in dataclasses.fields(BattleSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown scenario settings: {', '.join(unknown)}.")
    return dataclasses.replace(base, **raw)


def _parse_step(item: object, catalog: Mapping[str, ShipType], fleets: FleetRepository | None) -> Step:
    if not isinstance(item, dict):
        raise ValueError("Each scenario step must be an object.")
    try:
        player_id = str(item["player"])
        name = str(item["action"]).strip().lower()
    except KeyError as exc:
        raise ValueError("Scenario steps need 'player' and 'action'.") from exc

    if name == "place_fleet":
        if item.get("fleet"):
            saved = _require_fleets(fleets, name).load(str(item["fleet"]), catalog)
            return player_id, PlaceFleet(tuple(saved))
        return player_id, PlaceFleet(tuple(payload_to_placements(item.get("ships"), catalog)))
    if name == "auto_place":
        save_as = str(item["save_as"]) if item.get("save_as") else None
        if save_as is not None:
            _require_fleets(fleets, name)
        raw_types = item.get("ship_types")
        if raw_types is None:
            return player_id, AutoPlaceFleet(save_as=save_as)
        try:
            ship_types = tuple(catalog[str(type_id)] for type_id in raw_types)
        except KeyError as exc:
            raise ValueError(f"Unknown ship type {exc.args[0]!r}.") from exc
        return player_id, AutoPlaceFleet(ship_types, save_as)
    if name == "start":
        return player_id, StartBattle()
    if name == "end_turn":
        return player_id, EndTurn()
    if name == "ai_turn":
        return player_id, AITurn()
    try:
        if name == "attack":
            return player_id, Attack(
                target=_coord(item["target"]),
                kind=AttackKind(str(item.get("kind", AttackKind.NORMAL.value))),
                pattern=AttackPattern(str(item.get("pattern", AttackPattern.SINGLE.value))),
                direction=Orientation(str(item.get("direction", Orientation.HORIZONTAL.value))),
                firing_ship_id=item.get("ship"),
                elapsed_seconds=_optional_float(item.get("elapsed")),
            )
        if name == "ability":
            target = item.get("target")
            return player_id, UseAbility(
                ship_id=str(item["ship"]),
                ability_id=str(item["ability"]),
                target=_coord(target) if target is not None else None,
                elapsed_seconds=_optional_float(item.get("elapsed")),
            )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed '{name}' step.") from exc
    raise ValueError(f"Unknown scenario action '{name}'.")


def _require_fleets(fleets: FleetRepository | None, step: str) -> FleetRepository:
    if fleets is None:
        raise ValueError(f"Step '{step}' names a saved fleet but no fleet directory was given.")
    return fleets


def _coord(raw: object) -> Coord:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError("Coordinates must be [x, y].")
    return Coord(int(raw[0]), int(raw[1]))


def _optional_float(raw: Any) -> float | None:
    return None if raw is None else float(raw)


def outcome_to_payload(outcome: HarnessOutcome) -> dict[str, object]:
    """JSON-serializable view of one step outcome."""
    payload: dict[str, object] = {
        "index": outcome.index,
        "player": outcome.player_id,
        "action": outcome.action,
        "accepted": outcome.accepted,
    }
    if outcome.errors:
        payload["errors"] = [{"code": str(error.code), "message": error.message} for error in outcome.errors]
    if outcome.warnings:
        payload["warnings"] = list(outcome.warnings)
    result = outcome.result
    if isinstance(result, AttackResult) and result.accepted:
        payload["attack"] = attack_to_payload(result)
    elif isinstance(result, AbilityExecutionResult) and result.success:
        payload["ability"] = ability_to_payload(result)
    elif isinstance(result, AITurnReport):
        if result.ability_result is not None:
            payload["ability"] = ability_to_payload(result.ability_result)
        if result.attack_result is not None and result.attack_result.accepted:
            payload["attack"] = attack_to_payload(result.attack_result)
        if result.attack_decision is not None:
            payload["strategy"] = result.attack_decision.strategy_name
            payload["reasoning"] = list(result.attack_decision.reasoning)
    return payload


def attack_to_payload(result: AttackResult) -> dict[str, object]:
    payload: dict[str, object] = {
        "target": [result.coordinate.x, result.coordinate.y],
        "outcome": str(result.outcome),
        "ship_id": result.ship_id,
        "ship_sunk": result.ship_sunk,
        "damage": result.damage_dealt,
    }
    if result.chain_reaction:
        payload["cells"] = [
            {
                "target": [cell.coordinate.x, cell.coordinate.y],
                "outcome": str(cell.outcome),
                "damage": cell.damage_dealt,
            }
            for cell in result.chain_reaction
        ]
    return payload


def ability_to_payload(result: AbilityExecutionResult) -> dict[str, object]:
    return {
        "ability_id": result.ability_id,
        "ship_id": result.ship_id,
        "success": result.success,
        "messages": list(result.messages),
        "effects": [effect.id for effect in result.effects],
        "revealed": [[coord.x, coord.y] for coord in result.coordinates_revealed],
        "detected": list(result.ships_detected),
        "errors": [str(error.code) for error in result.errors],
    }


def run_scenario(
    payload: Mapping[str, Any],
    base: BattleSettings | None = None,
    fleet_dir: Path | None = None,
) -> list[HarnessOutcome]:
    """Parse and replay a scenario in one call."""
    scenario = parse_scenario(payload, base, fleet_dir)
    return ScenarioHarness(build_battle(scenario), scenario.fleets).run(scenario.steps)
