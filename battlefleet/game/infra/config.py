"""Battle configuration and env loading."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from battlefleet.game.core.errors import ConfigurationError


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = _resolve_env_path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files in order; later files overwrite earlier ones.

    Default order: ``.env``, ``.env.local``, ``.env.battlefleet``,
    ``.env.battlefleet.local``.
    """
    to_load = (
        tuple(paths)
        if paths is not None
        else (".env", ".env.local", ".env.battlefleet", ".env.battlefleet.local")
    )
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def _resolve_env_path(path: str) -> Path:
    """Resolve env path from cwd, then project root."""
    candidate = Path(path)
    if candidate.exists() or candidate.is_absolute():
        return candidate
    project_root = Path(__file__).resolve().parents[3]
    return project_root / path


def _int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}.")
    return value


def _float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from exc


@dataclass(frozen=True, slots=True)
class BattleSettings:
    """Immutable battle rules shared by every component of one game."""

    board_width: int = 10
    board_height: int = 10
    max_turns: int = 200
    turn_time_limit_seconds: float | None = None
    area_damage_multiplier: float = 0.5
    max_abilities_per_ship: int = 2
    max_abilities_per_turn: int = 1
    global_cooldown_turns: int = 0
    attacks_per_turn: int = 1
    ability_actions_per_turn: int = 3
    ai_difficulty: str = "intermediate"
    seed: int | None = None

    @classmethod
    def from_env(cls) -> BattleSettings:
        """Load settings from ``BATTLEFLEET_*`` environment variables."""
        raw_seed = os.getenv("BATTLEFLEET_SEED", "").strip()
        area = _float("BATTLEFLEET_AREA_DAMAGE_MULTIPLIER", 0.5)
        return cls(
            board_width=_int("BATTLEFLEET_BOARD_WIDTH", 10, minimum=1),
            board_height=_int("BATTLEFLEET_BOARD_HEIGHT", 10, minimum=1),
            max_turns=_int("BATTLEFLEET_MAX_TURNS", 200, minimum=1),
            turn_time_limit_seconds=_float("BATTLEFLEET_TURN_TIME_LIMIT", None),
            area_damage_multiplier=0.5 if area is None else area,
            max_abilities_per_ship=_int("BATTLEFLEET_MAX_ABILITIES_PER_SHIP", 2),
            max_abilities_per_turn=_int("BATTLEFLEET_MAX_ABILITIES_PER_TURN", 1),
            global_cooldown_turns=_int("BATTLEFLEET_GLOBAL_COOLDOWN_TURNS", 0),
            attacks_per_turn=_int("BATTLEFLEET_ATTACKS_PER_TURN", 1, minimum=1),
            ability_actions_per_turn=_int("BATTLEFLEET_ABILITY_ACTIONS_PER_TURN", 3),
            ai_difficulty=os.getenv("BATTLEFLEET_AI_DIFFICULTY", "intermediate").strip().lower()
            or "intermediate",
            seed=int(raw_seed) if raw_seed.lstrip("-").isdigit() else None,
        )
