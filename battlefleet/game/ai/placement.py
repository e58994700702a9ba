"""Fleet placement strategies."""

from __future__ import annotations

import math
import random

from battlefleet.game.ai.context import (
    AIContext,
    BehaviorProfile,
    PlacementAction,
    StrategyKind,
    StrategyResult,
)
from battlefleet.game.ai.strategy import Strategy
from battlefleet.game.core.models import Coord, Orientation, ShipPlacement, ShipType, placement_cells

CLUSTER_ATTEMPTS = 100
ZONE_ATTEMPTS = 50


def placement_ship_id(player_id: str, ship_type: ShipType, index: int) -> str:
    return f"{player_id}.{ship_type.type_id}_{index + 1}"


class _PlacementGrid:
    """Occupancy tracker for a fleet being laid out."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.occupied: set[Coord] = set()

    def fits(self, cells: list[Coord], bounds: tuple[int, int, int, int] | None = None) -> bool:
        x0, y0, x1, y1 = bounds or (0, 0, self.width, self.height)
        for cell in cells:
            if not (x0 <= cell.x < x1 and y0 <= cell.y < y1):
                return False
            if cell in self.occupied:
                return False
        return True

    def claim(self, cells: list[Coord]) -> None:
        self.occupied.update(cells)

    def scan(self, size: int) -> tuple[Coord, Orientation] | None:
        """Deterministic row-major search for the first legal spot."""
        for orientation in (Orientation.HORIZONTAL, Orientation.VERTICAL):
            for y in range(self.height):
                for x in range(self.width):
                    if self.fits(placement_cells(Coord(x, y), size, orientation)):
                        return Coord(x, y), orientation
        return None


def _random_attempt(
    grid: _PlacementGrid,
    rng: random.Random,
    size: int,
    bounds: tuple[int, int, int, int],
    attempts: int,
    *,
    keep_inside: bool,
) -> tuple[Coord, Orientation] | None:
    x0, y0, x1, y1 = bounds
    if x1 <= x0 or y1 <= y0:
        return None
    for _ in range(attempts):
        orientation = rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL))
        bow = Coord(rng.randrange(x0, x1), rng.randrange(y0, y1))
        cells = placement_cells(bow, size, orientation)
        if grid.fits(cells, bounds if keep_inside else None):
            return bow, orientation
    return None


def _finish_layout(
    strategy: Strategy,
    context: AIContext,
    grid: _PlacementGrid,
    chosen: dict[int, tuple[Coord, Orientation]],
    fallbacks: list[int],
    reasoning: list[str],
) -> StrategyResult:
    """Place ships the randomized pass missed by exhaustive scan and build the result."""
    unplaced: list[str] = []
    for index in fallbacks:
        ship_type = context.ships_to_place[index]
        spot = grid.scan(ship_type.size)
        if spot is None:
            unplaced.append(placement_ship_id(context.player_id, ship_type, index))
            continue
        grid.claim(placement_cells(spot[0], ship_type.size, spot[1]))
        chosen[index] = spot
    if fallbacks:
        reasoning.append(f"{len(fallbacks) - len(unplaced)} ship(s) placed by exhaustive scan.")
    if unplaced:
        reasoning.append(f"Warning: no legal position left for {', '.join(unplaced)}.")

    placements = tuple(
        ShipPlacement(
            ship_id=placement_ship_id(context.player_id, context.ships_to_place[index], index),
            ship_type=context.ships_to_place[index],
            bow=bow,
            orientation=orientation,
        )
        for index, (bow, orientation) in sorted(chosen.items())
    )
    total = len(context.ships_to_place)
    confidence = len(placements) / total if total else 0.0
    return strategy.create_result(PlacementAction(placements, tuple(unplaced)), confidence, reasoning)


class ClusteredPlacementStrategy(Strategy):
    """Packs the fleet into one randomly chosen quadrant."""

    name = "clustered_placement"
    kind = StrategyKind.PLACEMENT

    def is_applicable(self, context: AIContext) -> bool:
        return bool(context.ships_to_place)

    def calculate_priority(self, context: AIContext) -> float:
        return 0.7 if context.behavior is BehaviorProfile.DEFENSIVE else 0.4

    def execute(self, context: AIContext) -> StrategyResult:
        grid = _PlacementGrid(context.width, context.height)
        quadrant = context.rng.randrange(4)
        half_w = context.width // 2
        half_h = context.height // 2
        x0 = half_w if quadrant % 2 else 0
        y0 = half_h if quadrant // 2 else 0
        bounds = (
            x0,
            y0,
            context.width if quadrant % 2 else half_w,
            context.height if quadrant // 2 else half_h,
        )
        chosen: dict[int, tuple[Coord, Orientation]] = {}
        fallbacks: list[int] = []
        for index, ship_type in enumerate(context.ships_to_place):
            spot = _random_attempt(
                grid, context.rng, ship_type.size, bounds, CLUSTER_ATTEMPTS, keep_inside=False
            )
            if spot is None:
                fallbacks.append(index)
                continue
            grid.claim(placement_cells(spot[0], ship_type.size, spot[1]))
            chosen[index] = spot
        reasoning = [f"Clustering fleet around quadrant {quadrant}."]
        return _finish_layout(self, context, grid, chosen, fallbacks, reasoning)


class DistributedPlacementStrategy(Strategy):
    """Spreads ships over a ceil(sqrt(n)) x ceil(sqrt(n)) grid of zones."""

    name = "distributed_placement"
    kind = StrategyKind.PLACEMENT

    def is_applicable(self, context: AIContext) -> bool:
        return bool(context.ships_to_place)

    def calculate_priority(self, context: AIContext) -> float:
        return 0.6

    def execute(self, context: AIContext) -> StrategyResult:
        grid = _PlacementGrid(context.width, context.height)
        per_side = math.ceil(math.sqrt(len(context.ships_to_place)))
        zone_w = context.width // per_side
        zone_h = context.height // per_side
        chosen: dict[int, tuple[Coord, Orientation]] = {}
        fallbacks: list[int] = []
        for index, ship_type in enumerate(context.ships_to_place):
            zx0 = (index % per_side) * zone_w
            zy0 = (index // per_side) * zone_h
            bounds = (zx0, zy0, zx0 + zone_w, zy0 + zone_h)
            spot = _random_attempt(
                grid, context.rng, ship_type.size, bounds, ZONE_ATTEMPTS, keep_inside=True
            )
            if spot is None:
                fallbacks.append(index)
                continue
            grid.claim(placement_cells(spot[0], ship_type.size, spot[1]))
            chosen[index] = spot
        reasoning = [f"Distributing {len(context.ships_to_place)} ship(s) over {per_side}x{per_side} zones."]
        return _finish_layout(self, context, grid, chosen, fallbacks, reasoning)


def random_layout(context: AIContext) -> StrategyResult:
    """Uniform random placement used when no placement strategy applies."""
    fallback = _RandomPlacement()
    return fallback.execute(context)


class _RandomPlacement(Strategy):
    name = "random_placement"
    kind = StrategyKind.PLACEMENT

    def is_applicable(self, context: AIContext) -> bool:
        return bool(context.ships_to_place)

    def calculate_priority(self, context: AIContext) -> float:
        return 0.0

    def execute(self, context: AIContext) -> StrategyResult:
        grid = _PlacementGrid(context.width, context.height)
        bounds = (0, 0, context.width, context.height)
        chosen: dict[int, tuple[Coord, Orientation]] = {}
        fallbacks: list[int] = []
        for index, ship_type in enumerate(context.ships_to_place):
            spot = _random_attempt(
                grid, context.rng, ship_type.size, bounds, CLUSTER_ATTEMPTS, keep_inside=False
            )
            if spot is None:
                fallbacks.append(index)
                continue
            grid.claim(placement_cells(spot[0], ship_type.size, spot[1]))
            chosen[index] = spot
        return _finish_layout(self, context, grid, chosen, fallbacks, ["Random fallback placement."])
