"""Difficulty presets for AI players."""

from __future__ import annotations

from battlefleet.game.ai.context import Difficulty, DifficultySettings
from battlefleet.game.core.errors import ConfigurationError

DIFFICULTY_SETTINGS: dict[Difficulty, DifficultySettings] = {
    Difficulty.BEGINNER: DifficultySettings(
        difficulty=Difficulty.BEGINNER,
        probability_analysis=False,
        use_abilities=False,
        aggressiveness=0.3,
        defensiveness=0.7,
        mistake_probability=0.3,
    ),
    Difficulty.INTERMEDIATE: DifficultySettings(
        difficulty=Difficulty.INTERMEDIATE,
        probability_analysis=False,
        use_abilities=True,
        aggressiveness=0.5,
        defensiveness=0.5,
        mistake_probability=0.15,
    ),
    Difficulty.ADVANCED: DifficultySettings(
        difficulty=Difficulty.ADVANCED,
        probability_analysis=True,
        use_abilities=True,
        aggressiveness=0.7,
        defensiveness=0.4,
        mistake_probability=0.05,
    ),
    Difficulty.EXPERT: DifficultySettings(
        difficulty=Difficulty.EXPERT,
        probability_analysis=True,
        use_abilities=True,
        aggressiveness=0.6,
        defensiveness=0.6,
        mistake_probability=0.01,
    ),
}


def resolve_difficulty(value: str | Difficulty) -> Difficulty:
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown AI difficulty: {value!r}.") from exc


def settings_for(difficulty: str | Difficulty) -> DifficultySettings:
    return DIFFICULTY_SETTINGS[resolve_difficulty(difficulty)]
