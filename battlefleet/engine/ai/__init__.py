"""AI primitive implementations."""

from battlefleet.engine.ai.utility import best_action, clamp_unit, ranked_actions

__all__ = [
    "best_action",
    "clamp_unit",
    "ranked_actions",
]
