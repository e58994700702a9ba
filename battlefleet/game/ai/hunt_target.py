"""Hunt/Target strategy with checkerboard parity."""

from __future__ import annotations

from battlefleet.game.ai.context import AIContext, AttackAction, StrategyKind, StrategyResult
from battlefleet.game.ai.strategy import Strategy
from battlefleet.game.core.models import Coord


class HuntTargetStrategy(Strategy):
    """Target around unsunk hits, otherwise hunt on parity cells."""

    name = "hunt_target"
    kind = StrategyKind.TARGETING

    def is_applicable(self, context: AIContext) -> bool:
        return len(context.memory.shots_fired) < context.width * context.height

    def calculate_priority(self, context: AIContext) -> float:
        return 0.9 if context.memory.active_hits() else 0.5

    def execute(self, context: AIContext) -> StrategyResult:
        candidates = self._target_candidates(context)
        if candidates:
            return self.create_result(
                AttackAction(candidates[0]),
                0.8,
                [
                    f"Target mode: {len(context.memory.active_hits())} unsunk hit(s).",
                    f"Firing next to a confirmed hit at ({candidates[0].x}, {candidates[0].y}).",
                ],
                [AttackAction(cell) for cell in candidates[1:]],
            )

        unshot = context.unshot_cells()
        parity = [cell for cell in unshot if (cell.x + cell.y) % 2 == 0]
        if parity:
            choice = context.rng.choice(parity)
            return self.create_result(
                AttackAction(choice),
                0.5,
                [f"Hunt mode: {len(parity)} parity cell(s) left, picked ({choice.x}, {choice.y})."],
            )
        choice = context.rng.choice(unshot)
        return self.create_result(
            AttackAction(choice),
            0.3,
            ["Hunt mode: parity cells exhausted, firing at a random open cell."],
        )

    def _target_candidates(self, context: AIContext) -> list[Coord]:
        active = context.memory.active_hits()
        candidates: list[Coord] = []
        for hit in active:
            for cell in hit.neighbors():
                if not context.in_bounds(cell) or context.memory.is_shot(cell) or cell in candidates:
                    continue
                candidates.append(cell)
        return _prefer_line(active, candidates)


def _prefer_line(active: list[Coord], candidates: list[Coord]) -> list[Coord]:
    """With two or more aligned hits, try cells on that line first."""
    if len(active) < 2 or not candidates:
        return candidates
    rows = {cell.y for cell in active}
    cols = {cell.x for cell in active}
    if len(rows) == 1:
        on_line = [cell for cell in candidates if cell.y in rows]
    elif len(cols) == 1:
        on_line = [cell for cell in candidates if cell.x in cols]
    else:
        return candidates
    rest = [cell for cell in candidates if cell not in on_line]
    return on_line + rest
