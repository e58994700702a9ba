"""Command-line entry point: replay a battle scenario file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from battlefleet.engine.logging import shutdown_logging
from battlefleet.game.app.harness import ScenarioHarness, build_battle, outcome_to_payload, parse_scenario
from battlefleet.game.infra.config import BattleSettings, load_default_env_files
from battlefleet.game.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="battlefleet", description="Replay a naval battle scenario.")
    parser.add_argument("scenario", type=Path, help="Scenario JSON file with ordered player actions.")
    parser.add_argument("--seed", type=int, default=None, help="Override the scenario RNG seed.")
    parser.add_argument(
        "--fleet-dir",
        type=Path,
        default=None,
        help="Directory of saved fleets that scenario steps can load or save by name.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the final game state after the step outcomes.",
    )
    return parser


def load_scenario_payload(path: Path) -> dict[str, object]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Scenario payload must be a JSON object.")
    return payload


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_default_env_files()
    try:
        setup_logging()
        payload = load_scenario_payload(args.scenario)
        if args.seed is not None:
            payload["seed"] = args.seed
        scenario = parse_scenario(payload, BattleSettings.from_env(), args.fleet_dir)
        battle = build_battle(scenario)
    except (OSError, ValueError) as exc:
        print(f"Failed to load scenario '{args.scenario}': {exc}", file=sys.stderr)
        return 2

    outcomes = ScenarioHarness(battle, scenario.fleets).run(scenario.steps)
    for outcome in outcomes:
        print(json.dumps(outcome_to_payload(outcome)))
    if args.summary:
        session = battle.session
        print(
            json.dumps(
                {
                    "game_id": session.game_id,
                    "status": str(session.status),
                    "turn": session.turn_number,
                    "winner": session.winner,
                    "draw": session.is_draw,
                }
            )
        )
    logger.info("scenario_finished path=%s steps=%s", args.scenario, len(outcomes))
    shutdown_logging()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
