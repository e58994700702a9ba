"""Attack pattern enumeration."""

from __future__ import annotations

from battlefleet.game.core.board import Board
from battlefleet.game.core.models import AttackKind, AttackPattern, Coord, Orientation

LINE_REACH = 2


def effective_pattern(kind: AttackKind, pattern: AttackPattern) -> AttackPattern:
    """Area attacks without an explicit pattern cover a 3x3 square."""
    if kind is AttackKind.AREA and pattern is AttackPattern.SINGLE:
        return AttackPattern.SQUARE
    return pattern


def raw_pattern_cells(
    center: Coord,
    pattern: AttackPattern,
    direction: Orientation = Orientation.HORIZONTAL,
) -> list[Coord]:
    """Cells a pattern covers before bounds clipping, center first for cross and line."""
    if pattern is AttackPattern.SINGLE:
        return [center]
    if pattern is AttackPattern.CROSS:
        return [center, *center.neighbors()]
    if pattern is AttackPattern.SQUARE:
        return [center.offset(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)]
    reach = range(-LINE_REACH, LINE_REACH + 1)
    if direction is Orientation.HORIZONTAL:
        return [center.offset(d, 0) for d in reach]
    return [center.offset(0, d) for d in reach]


def pattern_cells(
    board: Board,
    center: Coord,
    pattern: AttackPattern,
    direction: Orientation = Orientation.HORIZONTAL,
) -> list[Coord]:
    """In-bounds cells a pattern covers on ``board``."""
    return [cell for cell in raw_pattern_cells(center, pattern, direction) if board.in_bounds(cell)]
