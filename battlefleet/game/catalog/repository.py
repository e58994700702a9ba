"""Named fleet layouts stored as versioned JSON files."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from battlefleet.engine.errors import log_recoverable
from battlefleet.game.catalog.schema import fleet_to_payload, payload_to_fleet
from battlefleet.game.catalog.standard import STANDARD_SHIP_TYPES
from battlefleet.game.core.board import Board
from battlefleet.game.core.fleet import validate_fleet
from battlefleet.game.core.models import BOARD_HEIGHT, BOARD_WIDTH, ShipPlacement, ShipType

logger = logging.getLogger(__name__)


class FleetRepository:
    """Saves and loads fleet layouts by name for one board size.

    Each layout lives in ``<stem>.json`` under ``root``. The name stored in
    the payload is authoritative, so names sharing a stem get numbered files.
    Layouts are validated against the board both when saved and when loaded.
    """

    def __init__(self, root: Path, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.root = root
        self.width = width
        self.height = height
        self.root.mkdir(parents=True, exist_ok=True)

    def names(self) -> list[str]:
        return sorted(self._index(), key=str.lower)

    def save(self, name: str, placements: Sequence[ShipPlacement]) -> Path:
        """Validate and store a layout, replacing any layout with the same name."""
        cleaned = _clean_name(name)
        self._check_layout(cleaned, placements)
        path = self._index().get(cleaned) or self._free_path(cleaned)
        payload = fleet_to_payload(cleaned, placements, self.width, self.height)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("fleet_saved", extra={"fleet": cleaned, "path": str(path), "ships": len(placements)})
        return path

    def load(self, name: str, catalog: Mapping[str, ShipType] = STANDARD_SHIP_TYPES) -> list[ShipPlacement]:
        """Load a layout, resolving ship types through ``catalog``."""
        cleaned = _clean_name(name)
        path = self._index().get(cleaned)
        if path is None:
            raise FileNotFoundError(f"Fleet '{cleaned}' not found.")
        payload = _read_payload(path)
        if payload is None:
            raise ValueError(f"Fleet '{cleaned}' is not a readable fleet file.")
        board = payload.get("board")
        if board != [self.width, self.height]:
            raise ValueError(
                f"Fleet '{cleaned}' was laid out for board {board}, not {self.width}x{self.height}."
            )
        _, placements = payload_to_fleet(payload, catalog)
        self._check_layout(cleaned, placements)
        return placements

    def delete(self, name: str) -> bool:
        path = self._index().get(_clean_name(name))
        if path is None:
            return False
        path.unlink()
        return True

    def _check_layout(self, name: str, placements: Sequence[ShipPlacement]) -> None:
        verdict = validate_fleet(placements, Board(self.width, self.height))
        if not verdict.is_valid:
            raise ValueError(f"Fleet '{name}' is not a legal layout: {verdict.errors[0].message}")

    def _index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for path in sorted(self.root.glob("*.json")):
            payload = _read_payload(path)
            stored = payload.get("name") if payload is not None else None
            label = stored.strip() if isinstance(stored, str) and stored.strip() else path.stem
            index.setdefault(label, path)
        return index

    def _free_path(self, name: str) -> Path:
        stem = _file_stem(name)
        path = self.root / f"{stem}.json"
        suffix = 2
        while path.exists():
            path = self.root / f"{stem}_{suffix}.json"
            suffix += 1
        return path


def _read_payload(path: Path) -> dict[str, object] | None:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        log_recoverable(logger, f"fleet_file_unreadable path={path}")
        return None
    return payload if isinstance(payload, dict) else None


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Fleet name cannot be empty.")
    return cleaned


def _file_stem(name: str) -> str:
    stem = "".join(char if char.isalnum() or char in "-_" else "_" for char in name).strip("_")
    return stem or "fleet"
