"""Per-player combat statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from battlefleet.game.core.models import AttackOutcome

if TYPE_CHECKING:
    from battlefleet.game.combat.resolver import AttackResult


@dataclass(slots=True)
class PlayerCombatStats:
    shots_fired: int = 0
    hits: int = 0
    misses: int = 0
    ships_destroyed: int = 0
    damage_dealt: int = 0

    @property
    def accuracy(self) -> float:
        if self.shots_fired == 0:
            return 0.0
        return self.hits / self.shots_fired


class CombatStatistics:
    """Aggregates accepted attack results per attacking player."""

    def __init__(self) -> None:
        self._stats: dict[str, PlayerCombatStats] = {}

    def record(self, player_id: str, result: AttackResult) -> None:
        stats = self._stats.setdefault(player_id, PlayerCombatStats())
        for cell in result.cell_results():
            stats.shots_fired += 1
            if cell.outcome is AttackOutcome.MISS:
                stats.misses += 1
                continue
            stats.hits += 1
            stats.damage_dealt += cell.damage_dealt
            if cell.ship_sunk:
                stats.ships_destroyed += 1

    def for_player(self, player_id: str) -> PlayerCombatStats:
        return self._stats.get(player_id, PlayerCombatStats())

    def reset(self) -> None:
        self._stats.clear()
