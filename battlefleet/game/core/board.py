"""Board state representation and mutation helpers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from battlefleet.game.core.models import BOARD_HEIGHT, BOARD_WIDTH, Coord


@dataclass(slots=True)
class Board:
    """Numpy-backed grid owned by one player.

    ``occupancy`` stores a 1-based index into ``ship_ids`` (0 is open water),
    ``hit_grid`` marks attacked cells and ``reveal_grid`` counts the turns a
    cell stays revealed to the opponent. Arrays are indexed ``[y, x]``.
    """

    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    owner_id: str = ""
    occupancy: np.ndarray = field(init=False)
    hit_grid: np.ndarray = field(init=False)
    reveal_grid: np.ndarray = field(init=False)
    ship_ids: list[str] = field(default_factory=list)
    ship_cells: dict[str, list[Coord]] = field(default_factory=dict)
    hits: list[Coord] = field(default_factory=list)
    misses: list[Coord] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Board dimensions must be positive.")
        self.occupancy = np.zeros((self.height, self.width), dtype=np.int16)
        self.hit_grid = np.zeros((self.height, self.width), dtype=np.bool_)
        self.reveal_grid = np.zeros((self.height, self.width), dtype=np.int16)

    def in_bounds(self, coord: Coord) -> bool:
        """Return whether the coordinate is in board bounds."""
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def can_place(self, cells: Iterable[Coord]) -> bool:
        """Return whether all cells are in bounds and unoccupied."""
        for cell in cells:
            if not self.in_bounds(cell):
                return False
            if self.occupancy[cell.y, cell.x] != 0:
                return False
        return True

    def place_ship(self, ship_id: str, cells: list[Coord]) -> None:
        """Place a ship on the board."""
        if ship_id in self.ship_cells:
            raise ValueError(f"Ship '{ship_id}' is already on the board.")
        if not cells or not self.can_place(cells):
            raise ValueError(f"Invalid placement for ship '{ship_id}'.")
        self.ship_ids.append(ship_id)
        index = len(self.ship_ids)
        for cell in cells:
            self.occupancy[cell.y, cell.x] = index
        self.ship_cells[ship_id] = list(cells)

    def ship_at(self, coord: Coord) -> str | None:
        """Return the id of the ship covering a cell, if any."""
        if not self.in_bounds(coord):
            return None
        index = int(self.occupancy[coord.y, coord.x])
        if index == 0:
            return None
        return self.ship_ids[index - 1]

    def is_hit(self, coord: Coord) -> bool:
        """Return whether this cell was previously attacked."""
        return bool(self.hit_grid[coord.y, coord.x])

    def mark_hit(self, coord: Coord) -> None:
        """Mark a cell as attacked and file it under hits or misses."""
        self.hit_grid[coord.y, coord.x] = True
        if self.occupancy[coord.y, coord.x] != 0:
            self.hits.append(coord)
        else:
            self.misses.append(coord)

    def reveal(self, coord: Coord, turns: int) -> bool:
        """Reveal a cell for ``turns`` turns; return whether it was hidden before."""
        newly_revealed = self.reveal_grid[coord.y, coord.x] == 0
        self.reveal_grid[coord.y, coord.x] = max(int(self.reveal_grid[coord.y, coord.x]), turns)
        return bool(newly_revealed)

    def is_revealed(self, coord: Coord) -> bool:
        return bool(self.reveal_grid[coord.y, coord.x] > 0)

    def revealed_cells(self) -> list[Coord]:
        ys, xs = np.nonzero(self.reveal_grid)
        return [Coord(int(x), int(y)) for y, x in zip(ys, xs)]

    def tick_reveals(self) -> None:
        """Count down reveal timers by one turn."""
        np.subtract(self.reveal_grid, 1, out=self.reveal_grid, where=self.reveal_grid > 0)

    def area(self, center: Coord, radius: int) -> list[Coord]:
        """Return in-bounds cells of the square area around ``center`` in row-major order."""
        return [
            Coord(x, y)
            for y in range(center.y - radius, center.y + radius + 1)
            for x in range(center.x - radius, center.x + radius + 1)
            if self.in_bounds(Coord(x, y))
        ]
