"""AI scoring helpers."""

from __future__ import annotations


def clamp_unit(value: float) -> float:
    """Clamp a score into the closed unit interval."""
    return min(1.0, max(0.0, value))


def ranked_actions(scores: dict[str, float]) -> list[str]:
    """Return actions by descending score; ties keep insertion order."""
    return sorted(scores, key=lambda action: -scores[action])


def best_action(scores: dict[str, float]) -> str | None:
    """Return highest-scoring action with insertion-order tie-breaker."""
    ranked = ranked_actions(scores)
    return ranked[0] if ranked else None
