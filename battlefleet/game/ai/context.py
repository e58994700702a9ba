"""Decision context, recommended actions and strategy results."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import StrEnum

from battlefleet.engine.ai.utility import clamp_unit
from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.core.models import Coord, ShipPlacement, ShipType


class StrategyKind(StrEnum):
    TARGETING = "targeting"
    PLACEMENT = "placement"
    ABILITY = "ability"


class Difficulty(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class BehaviorProfile(StrEnum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    UNPREDICTABLE = "unpredictable"


@dataclass(frozen=True, slots=True)
class DifficultySettings:
    """Per-difficulty tuning; gates which strategies are applicable."""

    difficulty: Difficulty
    probability_analysis: bool
    use_abilities: bool
    aggressiveness: float
    defensiveness: float
    mistake_probability: float


@dataclass(frozen=True, slots=True)
class AttackAction:
    target: Coord


@dataclass(frozen=True, slots=True)
class PlacementAction:
    placements: tuple[ShipPlacement, ...]
    unplaced: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class AbilityAction:
    ship_id: str
    ability_id: str
    target: Coord | None = None


StrategyAction = AttackAction | PlacementAction | AbilityAction


@dataclass(frozen=True, slots=True)
class AbilityOption:
    """A ready ability the AI could activate this turn."""

    ship_id: str
    ability_id: str
    name: str
    requires_target: bool = False


@dataclass(slots=True)
class StrategyResult:
    action: StrategyAction | None
    confidence: float
    reasoning: list[str] = field(default_factory=list)
    alternatives: list[StrategyAction] = field(default_factory=list)
    strategy_name: str = ""

    def __post_init__(self) -> None:
        self.confidence = clamp_unit(self.confidence)


@dataclass(slots=True)
class AIContext:
    """Everything a strategy may read. Strategies never see the enemy board."""

    player_id: str
    memory: AIMemory
    settings: DifficultySettings
    rng: random.Random
    width: int
    height: int
    behavior: BehaviorProfile = BehaviorProfile.BALANCED
    turn_number: int = 1
    threat_level: float = 0.0
    ships_to_place: tuple[ShipType, ...] = ()
    abilities: tuple[AbilityOption, ...] = ()

    def in_bounds(self, coord: Coord) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def unshot_cells(self) -> list[Coord]:
        """Row-major list of cells this agent has not fired at."""
        return [
            Coord(x, y)
            for y in range(self.height)
            for x in range(self.width)
            if Coord(x, y) not in self.memory.shots_fired
        ]
