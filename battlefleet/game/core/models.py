"""Core domain models used by combat, abilities and AI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

BOARD_WIDTH = 10
BOARD_HEIGHT = 10
STANDARD_FLEET_SIZES: tuple[int, ...] = (5, 4, 3, 3, 2)


class Orientation(StrEnum):
    """Ship or line orientation."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ShipClass(StrEnum):
    """Naval ship classes."""

    CARRIER = "carrier"
    BATTLESHIP = "battleship"
    BATTLECRUISER = "battlecruiser"
    HEAVY_CRUISER = "heavy_cruiser"
    LIGHT_CRUISER = "light_cruiser"
    DESTROYER = "destroyer"
    SUBMARINE = "submarine"
    FRIGATE = "frigate"
    CORVETTE = "corvette"
    PATROL_BOAT = "patrol_boat"


class ShipEra(StrEnum):
    """Historical era a ship design belongs to."""

    PRE_DREADNOUGHT = "pre_dreadnought"
    DREADNOUGHT = "dreadnought"
    SUPER_DREADNOUGHT = "super_dreadnought"
    BATTLECRUISER = "battlecruiser"
    MODERN = "modern"
    FICTIONAL = "fictional"


class AttackOutcome(StrEnum):
    """Outcome of an attack on one cell or a composite pattern."""

    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"


class AttackKind(StrEnum):
    """Attack flavour, controls base damage and area handling."""

    NORMAL = "normal"
    SPECIAL = "special"
    AREA = "area"


class AttackPattern(StrEnum):
    """Cell patterns an attack can cover."""

    SINGLE = "single"
    CROSS = "cross"
    SQUARE = "square"
    LINE = "line"


class GameStatus(StrEnum):
    """Lifecycle status of one game."""

    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class GamePhase(StrEnum):
    """Phase inside an active game."""

    PLACEMENT = "placement"
    BATTLE = "battle"
    ENDED = "ended"


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate, x is the column and y the row."""

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Coord:
        return Coord(self.x + dx, self.y + dy)

    def neighbors(self) -> tuple[Coord, Coord, Coord, Coord]:
        """Return orthogonal neighbours in left, right, up, down order."""
        return (
            Coord(self.x - 1, self.y),
            Coord(self.x + 1, self.y),
            Coord(self.x, self.y - 1),
            Coord(self.x, self.y + 1),
        )


@dataclass(frozen=True, slots=True)
class ShipType:
    """Static ship configuration loaded once per battle."""

    type_id: str
    name: str
    ship_class: ShipClass
    era: ShipEra
    size: int
    hit_points: int | None = None
    armor: int = 0
    firepower: int = 1
    ability_ids: tuple[str, ...] = ()

    @property
    def max_hit_points(self) -> int:
        return self.hit_points if self.hit_points is not None else self.size


@dataclass(frozen=True, slots=True)
class ShipPlacement:
    """Placement of one ship on its owner's board."""

    ship_id: str
    ship_type: ShipType
    bow: Coord
    orientation: Orientation

    @property
    def size(self) -> int:
        return self.ship_type.size


def placement_cells(bow: Coord, size: int, orientation: Orientation) -> list[Coord]:
    """Compute occupied cells for a bow coordinate, size and orientation."""
    if orientation is Orientation.HORIZONTAL:
        return [Coord(bow.x + i, bow.y) for i in range(size)]
    return [Coord(bow.x, bow.y + i) for i in range(size)]


def cells_for_placement(placement: ShipPlacement) -> list[Coord]:
    """Compute occupied cells for a ship placement."""
    return placement_cells(placement.bow, placement.size, placement.orientation)
