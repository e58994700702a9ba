"""Per-agent record of shots, hits, misses and confirmed sinkings."""

from __future__ import annotations

from dataclasses import dataclass, field

from battlefleet.game.combat.resolver import AttackResult
from battlefleet.game.core.models import STANDARD_FLEET_SIZES, AttackOutcome, Coord, Orientation


@dataclass(frozen=True, slots=True)
class HitRecord:
    coordinate: Coord
    turn: int
    ship_id: str | None


@dataclass(slots=True)
class ConfirmedShip:
    """An enemy ship known from at least one hit."""

    ship_id: str
    positions: list[Coord] = field(default_factory=list)

    @property
    def orientation(self) -> Orientation | None:
        if len(self.positions) < 2:
            return None
        if len({cell.y for cell in self.positions}) == 1:
            return Orientation.HORIZONTAL
        if len({cell.x for cell in self.positions}) == 1:
            return Orientation.VERTICAL
        return None


@dataclass(frozen=True, slots=True)
class SunkShip:
    ship_id: str
    positions: tuple[Coord, ...]
    sunk_turn: int
    size: int


@dataclass(frozen=True, slots=True)
class MemorySnapshot:
    """Read-only view for spectator and debug tooling."""

    shots_fired: frozenset[Coord]
    hits: tuple[HitRecord, ...]
    misses: tuple[Coord, ...]
    confirmed_ships: tuple[tuple[str, tuple[Coord, ...]], ...]
    sunken_ships: tuple[SunkShip, ...]


class AIMemory:
    """What one AI agent has learned about the opponent's board."""

    def __init__(self) -> None:
        self.shots_fired: set[Coord] = set()
        self.hits: list[HitRecord] = []
        self.misses: list[Coord] = []
        self.confirmed_ships: dict[str, ConfirmedShip] = {}
        self.sunken_ships: list[SunkShip] = []

    def is_shot(self, coord: Coord) -> bool:
        return coord in self.shots_fired

    def record_attack(self, result: AttackResult, turn: int) -> None:
        """Fold an accepted attack result into memory; rejected results are ignored."""
        if not result.accepted:
            return
        for cell in result.cell_results():
            self._record_cell(cell, turn)

    def _record_cell(self, cell: AttackResult, turn: int) -> None:
        coord = cell.coordinate
        if coord in self.shots_fired:
            return
        self.shots_fired.add(coord)
        if cell.outcome is AttackOutcome.MISS:
            self.misses.append(coord)
            return

        self.hits.append(HitRecord(coord, turn, cell.ship_id))
        # Wreck cells of a ship sunk before all of its cells were hit.
        if cell.ship_id is None or cell.ship_id in self.sunk_ship_ids():
            return
        confirmed = self.confirmed_ships.setdefault(cell.ship_id, ConfirmedShip(cell.ship_id))
        confirmed.positions.append(coord)
        if cell.ship_sunk:
            self.confirmed_ships.pop(cell.ship_id)
            self.sunken_ships.append(
                SunkShip(
                    ship_id=cell.ship_id,
                    positions=tuple(confirmed.positions),
                    sunk_turn=turn,
                    size=cell.sunk_ship_size or len(confirmed.positions),
                )
            )

    def sunk_ship_ids(self) -> set[str]:
        return {ship.ship_id for ship in self.sunken_ships}

    def sunk_positions(self) -> set[Coord]:
        return {cell for ship in self.sunken_ships for cell in ship.positions}

    def active_hits(self) -> list[Coord]:
        """Hits on ships not yet confirmed sunk, oldest first."""
        sunk = self.sunk_ship_ids()
        return [
            record.coordinate
            for record in self.hits
            if record.ship_id is None or record.ship_id not in sunk
        ]

    def remaining_sizes(self, fleet_sizes: tuple[int, ...] = STANDARD_FLEET_SIZES) -> list[int]:
        """Fleet sizes not yet accounted for by confirmed sinkings."""
        remaining = list(fleet_sizes)
        for ship in self.sunken_ships:
            if ship.size in remaining:
                remaining.remove(ship.size)
        return remaining

    def snapshot(self) -> MemorySnapshot:
        return MemorySnapshot(
            shots_fired=frozenset(self.shots_fired),
            hits=tuple(self.hits),
            misses=tuple(self.misses),
            confirmed_ships=tuple(
                (ship_id, tuple(ship.positions)) for ship_id, ship in self.confirmed_ships.items()
            ),
            sunken_ships=tuple(self.sunken_ships),
        )

    def reset(self) -> None:
        self.shots_fired.clear()
        self.hits.clear()
        self.misses.clear()
        self.confirmed_ships.clear()
        self.sunken_ships.clear()
