"""App-level logging policy over engine logging API."""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from battlefleet.engine.logging import EngineLoggingConfig, JsonFormatter, configure_logging
from battlefleet.game.core.errors import ConfigurationError

__all__ = ["JsonFormatter", "build_logging_config", "parse_logger_levels", "setup_logging"]


def build_logging_config() -> EngineLoggingConfig:
    """Resolve logging configuration from environment."""
    level_name = os.getenv("BATTLEFLEET_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO")).upper()
    console_format = os.getenv("LOG_FORMAT", "text").lower()
    return EngineLoggingConfig(
        level_name=level_name,
        console_format=console_format,
        file_path=_resolve_run_log_file_path(),
        file_format="json",
        logger_levels=parse_logger_levels(os.getenv("BATTLEFLEET_LOG_LEVELS", "")),
    )


def parse_logger_levels(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse ``name=LEVEL`` pairs, e.g. ``battlefleet.game.ai=DEBUG,battlefleet.game.combat=WARNING``."""
    levels: list[tuple[str, str]] = []
    for item in raw.split(","):
        name, sep, level = item.partition("=")
        if not sep or not name.strip():
            continue
        level_name = level.strip().upper()
        if level_name not in logging.getLevelNamesMapping():
            raise ConfigurationError(f"Unknown log level {level.strip()!r} for logger {name.strip()!r}.")
        levels.append((name.strip(), level_name))
    return tuple(levels)


def setup_logging() -> None:
    """Configure application logging via engine logging API."""
    config = build_logging_config()
    configure_logging(config)
    if config.file_path:
        logging.getLogger(__name__).info("logging_file=%s", config.file_path)


def _resolve_run_log_file_path() -> str | None:
    configured = os.getenv("BATTLEFLEET_LOG_DIR", "").strip()
    if not configured:
        return None
    base_dir = Path(configured)
    base_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    return str(base_dir / f"battlefleet_run_{stamp}.jsonl")
