"""Damage modifier pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass

from battlefleet.game.core.models import AttackKind

NORMAL_BASE_DAMAGE = 1
SPECIAL_BASE_DAMAGE = 2
DEFAULT_AREA_MULTIPLIER = 0.5
ARMOR_REDUCTION_PER_POINT = 0.1
MIN_ARMOR_MULTIPLIER = 0.2


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up."""
    return math.floor(value + 0.5)


def base_damage(kind: AttackKind) -> int:
    return SPECIAL_BASE_DAMAGE if kind is AttackKind.SPECIAL else NORMAL_BASE_DAMAGE


def armor_multiplier(armor: int, penetration: float = 0) -> float:
    """Damage multiplier after penetration reduces the target's armor."""
    effective_armor = max(0.0, armor - penetration)
    return max(MIN_ARMOR_MULTIPLIER, 1 - ARMOR_REDUCTION_PER_POINT * effective_armor)


def armor_piercing_damage(base: float, armor: int, penetration: float) -> int:
    return round_half_up(base * armor_multiplier(armor, penetration))


@dataclass(frozen=True, slots=True)
class DamageBreakdown:
    """Every stage of one damage calculation, for logs and tests."""

    base: int
    boost: float
    area_multiplier: float | None
    armor: int
    penetration: float
    multiplier: float
    final: int


def compute_damage(
    base: int,
    *,
    armor: int = 0,
    boost: float = 1.0,
    penetration: float = 0,
    area_multiplier: float | None = None,
) -> DamageBreakdown:
    """Run base damage through attacker effects then defender armor.

    Area attacks scale per cell and round up before armor applies. A hit on a
    ship always deals at least one point.
    """
    boosted = base * (boost if boost > 0 else 1.0)
    if area_multiplier is not None:
        boosted = math.ceil(boosted * area_multiplier)
    multiplier = armor_multiplier(armor, penetration)
    final = max(1, round_half_up(boosted * multiplier))
    return DamageBreakdown(
        base=base,
        boost=boost,
        area_multiplier=area_multiplier,
        armor=armor,
        penetration=penetration,
        multiplier=multiplier,
        final=final,
    )
