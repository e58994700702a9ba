"""Attack request validation and per-turn rate limiting."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from battlefleet.game.core.errors import ErrorCode, ValidationResult
from battlefleet.game.core.models import (
    AttackKind,
    AttackPattern,
    Coord,
    GamePhase,
    GameStatus,
    Orientation,
)
from battlefleet.game.core.rules import GameSession

ACTION_ATTACK = "attack"
ACTION_ABILITY = "ability"


@dataclass(frozen=True, slots=True)
class AttackRequest:
    """One player's request to fire at the opponent's board."""

    player_id: str
    target: Coord
    kind: AttackKind = AttackKind.NORMAL
    pattern: AttackPattern = AttackPattern.SINGLE
    direction: Orientation = Orientation.HORIZONTAL
    firing_ship_id: str | None = None
    elapsed_seconds: float | None = None


class RateLimiter:
    """Counts committed actions per (player, action kind) for the current turn."""

    def __init__(self, limits: Mapping[str, int]) -> None:
        self._limits = dict(limits)
        self._counts: dict[tuple[str, str], tuple[int, int]] = {}

    def count(self, player_id: str, action: str, turn: int) -> int:
        stored_turn, count = self._counts.get((player_id, action), (turn, 0))
        return count if stored_turn == turn else 0

    def allows(self, player_id: str, action: str, turn: int) -> bool:
        limit = self._limits.get(action)
        if limit is None:
            return True
        return self.count(player_id, action, turn) < limit

    def record(self, player_id: str, action: str, turn: int) -> None:
        self._counts[(player_id, action)] = (turn, self.count(player_id, action, turn) + 1)

    def reset(self) -> None:
        self._counts.clear()


def validate_turn_action(
    session: GameSession,
    player_id: str,
    action: str,
    rate_limiter: RateLimiter,
    *,
    elapsed_seconds: float | None = None,
    turn_time_limit: float | None = None,
) -> ValidationResult:
    """Checks shared by attacks and ability use, in a fixed order."""
    if not session.has_player(player_id):
        return ValidationResult.fail(ErrorCode.UNKNOWN_PLAYER, f"Unknown player '{player_id}'.")
    if session.status is not GameStatus.ACTIVE:
        return ValidationResult.fail(ErrorCode.GAME_NOT_ACTIVE, "Game is not active.")
    if session.phase is not GamePhase.BATTLE:
        return ValidationResult.fail(ErrorCode.NOT_BATTLE_PHASE, "Game is not in the battle phase.")
    if session.current_player != player_id:
        return ValidationResult.fail(ErrorCode.NOT_YOUR_TURN, f"It is {session.current_player}'s turn.")
    if turn_time_limit is not None and elapsed_seconds is not None and elapsed_seconds > turn_time_limit:
        return ValidationResult.fail(
            ErrorCode.TURN_TIME_EXCEEDED,
            f"Turn time exceeded ({elapsed_seconds:.1f}s > {turn_time_limit:.1f}s).",
        )
    if not rate_limiter.allows(player_id, action, session.turn_number):
        return ValidationResult.fail(ErrorCode.RATE_LIMITED, f"Too many {action} actions this turn.")
    return ValidationResult.ok()


class CombatValidator:
    """Validates attack requests before any state is touched."""

    def __init__(self, turn_time_limit: float | None = None) -> None:
        self._turn_time_limit = turn_time_limit

    @property
    def turn_time_limit(self) -> float | None:
        return self._turn_time_limit

    def validate_attack(
        self,
        session: GameSession,
        request: AttackRequest,
        rate_limiter: RateLimiter,
    ) -> ValidationResult:
        verdict = validate_turn_action(
            session,
            request.player_id,
            ACTION_ATTACK,
            rate_limiter,
            elapsed_seconds=request.elapsed_seconds,
            turn_time_limit=self._turn_time_limit,
        )
        if not verdict.is_valid:
            return verdict

        if request.firing_ship_id is not None:
            ship = session.ships.get(request.firing_ship_id)
            if ship is None or ship.player_id != request.player_id:
                return ValidationResult.fail(
                    ErrorCode.SHIP_NOT_FOUND,
                    f"Ship '{request.firing_ship_id}' not found.",
                    "firing_ship_id",
                )
            if ship.is_sunk:
                return ValidationResult.fail(
                    ErrorCode.SHIP_SUNK, f"{ship.id} has been sunk and cannot fire.", "firing_ship_id"
                )

        board = session.board_of(session.opponent_of(request.player_id))
        if not board.in_bounds(request.target):
            return ValidationResult.fail(
                ErrorCode.OUT_OF_BOUNDS,
                f"Target ({request.target.x}, {request.target.y}) is outside the "
                f"{board.width}x{board.height} board.",
                "target",
            )

        warnings: tuple[str, ...] = ()
        if board.is_hit(request.target):
            warnings = ("Cell has already been attacked.",)
        return ValidationResult.ok(warnings)
