"""Mutable per-battle ship state."""

from __future__ import annotations

from dataclasses import dataclass, field

from battlefleet.game.core.models import Coord, ShipClass, ShipEra, ShipType


@dataclass(slots=True)
class Ship:
    """A ship instance created from a static ``ShipType``.

    Hit points only ever go down and the sunk flag flips exactly once, when
    hit points first reach zero. ``ability_ids`` reference ability instances
    owned by the game session.
    """

    id: str
    player_id: str
    ship_type: ShipType
    cells: tuple[Coord, ...]
    hit_points: int = field(init=False)
    max_hit_points: int = field(init=False)
    hit_positions: list[Coord] = field(default_factory=list)
    is_sunk: bool = False
    sunk_turn: int | None = None
    has_fired: bool = False
    ability_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.max_hit_points = self.ship_type.max_hit_points
        self.hit_points = self.max_hit_points

    @property
    def ship_class(self) -> ShipClass:
        return self.ship_type.ship_class

    @property
    def era(self) -> ShipEra:
        return self.ship_type.era

    @property
    def size(self) -> int:
        return self.ship_type.size

    @property
    def armor(self) -> int:
        return self.ship_type.armor

    @property
    def firepower(self) -> int:
        return self.ship_type.firepower

    @property
    def is_damaged(self) -> bool:
        return self.hit_points < self.max_hit_points

    def apply_damage(self, coord: Coord, damage: int, turn: int) -> bool:
        """Apply damage at ``coord``; return True when this call sank the ship."""
        if coord not in self.hit_positions:
            self.hit_positions.append(coord)
        self.hit_points = max(0, self.hit_points - max(0, damage))
        if self.hit_points == 0 and not self.is_sunk:
            self.is_sunk = True
            self.sunk_turn = turn
            return True
        return False
