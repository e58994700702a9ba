"""Victory and draw detection."""

from __future__ import annotations

from dataclasses import dataclass

from battlefleet.game.core.rules import GameSession

DEFAULT_MAX_TURNS = 200


@dataclass(frozen=True, slots=True)
class GameOutcome:
    finished: bool
    winner: str | None = None
    is_draw: bool = False
    reason: str = ""


def evaluate(session: GameSession, max_turns: int = DEFAULT_MAX_TURNS) -> GameOutcome:
    """Return whether the game is over after the last committed action."""
    first, second = session.player_ids
    first_down = session.fleet_destroyed(first)
    second_down = session.fleet_destroyed(second)
    if first_down and second_down:
        return GameOutcome(True, None, True, "Both fleets destroyed.")
    if second_down:
        return GameOutcome(True, first, False, f"{first} wins: all enemy ships sunk.")
    if first_down:
        return GameOutcome(True, second, False, f"{second} wins: all enemy ships sunk.")
    if session.turn_number > max_turns:
        return GameOutcome(True, None, True, f"Draw: turn limit of {max_turns} reached.")
    return GameOutcome(False)
