import pytest

from battlefleet.game.combat.damage import (
    armor_multiplier,
    armor_piercing_damage,
    base_damage,
    compute_damage,
    round_half_up,
)
from battlefleet.game.combat.patterns import effective_pattern, pattern_cells, raw_pattern_cells
from battlefleet.game.core.board import Board
from battlefleet.game.core.models import AttackKind, AttackPattern, Coord, Orientation


def test_armor_piercing_reduces_effective_armor() -> None:
    assert armor_piercing_damage(10, 5, 3) == 8
    assert armor_piercing_damage(10, 2, 5) == 10


def test_armor_multiplier_has_a_floor() -> None:
    assert armor_multiplier(20) == pytest.approx(0.2)
    assert armor_multiplier(2) == pytest.approx(0.8)


def test_rounding_is_half_up() -> None:
    assert round_half_up(1.5) == 2
    assert round_half_up(2.5) == 3
    assert round_half_up(1.49) == 1


def test_base_damage_by_kind() -> None:
    assert base_damage(AttackKind.NORMAL) == 1
    assert base_damage(AttackKind.AREA) == 1
    assert base_damage(AttackKind.SPECIAL) == 2


def test_compute_damage_pipeline() -> None:
    boosted = compute_damage(1, boost=1.5)
    assert boosted.final == 2
    assert compute_damage(1, armor=2, boost=1.5).final == 1
    assert compute_damage(2, armor=10).final == 1
    area = compute_damage(2, boost=1.5, area_multiplier=0.5)
    assert area.final == 2
    assert area.area_multiplier == 0.5


def test_area_attack_without_pattern_becomes_square() -> None:
    assert effective_pattern(AttackKind.AREA, AttackPattern.SINGLE) is AttackPattern.SQUARE
    assert effective_pattern(AttackKind.AREA, AttackPattern.CROSS) is AttackPattern.CROSS
    assert effective_pattern(AttackKind.NORMAL, AttackPattern.SINGLE) is AttackPattern.SINGLE


def test_cross_is_clipped_at_corner() -> None:
    cells = pattern_cells(Board(), Coord(0, 0), AttackPattern.CROSS)
    assert cells == [Coord(0, 0), Coord(1, 0), Coord(0, 1)]


def test_line_follows_direction() -> None:
    cells = pattern_cells(Board(), Coord(5, 1), AttackPattern.LINE, Orientation.VERTICAL)
    assert cells == [Coord(5, 0), Coord(5, 1), Coord(5, 2), Coord(5, 3)]
    assert len(raw_pattern_cells(Coord(5, 1), AttackPattern.LINE)) == 5
