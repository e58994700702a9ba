"""Probability-density targeting over all legal remaining placements."""

from __future__ import annotations

import numpy as np

from battlefleet.game.ai.context import AIContext, AttackAction, StrategyKind, StrategyResult
from battlefleet.game.ai.strategy import Strategy
from battlefleet.game.core.models import STANDARD_FLEET_SIZES, Coord


class ProbabilityDensityStrategy(Strategy):
    """Scores cells by how many remaining ship placements cover them."""

    name = "probability_density"
    kind = StrategyKind.TARGETING

    def __init__(self, fleet_sizes: tuple[int, ...] = STANDARD_FLEET_SIZES) -> None:
        self._fleet_sizes = fleet_sizes

    def is_applicable(self, context: AIContext) -> bool:
        if not context.settings.probability_analysis:
            return False
        return len(context.memory.shots_fired) < context.width * context.height

    def calculate_priority(self, context: AIContext) -> float:
        return 0.7

    def density_grid(self, context: AIContext) -> np.ndarray:
        """Placement counts per cell, normalized to 0-100, indexed ``[y, x]``."""
        blocked = np.zeros((context.height, context.width), dtype=np.bool_)
        for cell in context.memory.misses:
            blocked[cell.y, cell.x] = True
        for cell in context.memory.sunk_positions():
            blocked[cell.y, cell.x] = True

        counts = np.zeros((context.height, context.width), dtype=np.int32)
        for size in context.memory.remaining_sizes(self._fleet_sizes):
            _accumulate_horizontal(counts, blocked, size)
            _accumulate_vertical(counts, blocked, size)

        peak = counts.max() if counts.size else 0
        if peak == 0:
            return np.zeros_like(counts, dtype=np.float64)
        return counts * (100.0 / peak)

    def execute(self, context: AIContext) -> StrategyResult:
        grid = self.density_grid(context)
        shot = np.zeros_like(grid, dtype=np.bool_)
        for cell in context.memory.shots_fired:
            shot[cell.y, cell.x] = True
        scores = np.where(shot, -1.0, grid)

        best_index = int(np.argmax(scores))
        best_y, best_x = divmod(best_index, context.width)
        probability = float(scores[best_y, best_x])
        if probability <= 0:
            open_cells = context.unshot_cells()
            choice = context.rng.choice(open_cells)
            return self.create_result(
                AttackAction(choice),
                0.0,
                ["No remaining placement covers an open cell; firing at random."],
            )

        order = np.argsort(-scores, axis=None, kind="stable")
        alternatives = []
        for index in order[1:4]:
            y, x = divmod(int(index), context.width)
            if scores[y, x] > 0:
                alternatives.append(AttackAction(Coord(x, y)))
        return self.create_result(
            AttackAction(Coord(best_x, best_y)),
            probability / 100.0,
            [
                f"Remaining ship sizes: {context.memory.remaining_sizes(self._fleet_sizes)}.",
                f"Highest density at ({best_x}, {best_y}) with score {probability:.1f}/100.",
            ],
            alternatives,
        )


def _accumulate_horizontal(counts: np.ndarray, blocked: np.ndarray, size: int) -> None:
    height, width = counts.shape
    for y in range(height):
        for x in range(width - size + 1):
            if not blocked[y, x : x + size].any():
                counts[y, x : x + size] += 1


def _accumulate_vertical(counts: np.ndarray, blocked: np.ndarray, size: int) -> None:
    height, width = counts.shape
    for x in range(width):
        for y in range(height - size + 1):
            if not blocked[y : y + size, x].any():
                counts[y : y + size, x] += 1
