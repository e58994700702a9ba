"""Coded validation results and configuration errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorCode(StrEnum):
    """Player-facing rejection codes."""

    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    NOT_BATTLE_PHASE = "NOT_BATTLE_PHASE"
    NOT_PLACEMENT_PHASE = "NOT_PLACEMENT_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    TURN_TIME_EXCEEDED = "TURN_TIME_EXCEEDED"
    RATE_LIMITED = "RATE_LIMITED"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    INVALID_PLACEMENT = "INVALID_PLACEMENT"
    SHIP_NOT_FOUND = "SHIP_NOT_FOUND"
    SHIP_SUNK = "SHIP_SUNK"
    ABILITY_NOT_FOUND = "ABILITY_NOT_FOUND"
    ABILITY_INACTIVE = "ABILITY_INACTIVE"
    ABILITY_ON_COOLDOWN = "ABILITY_ON_COOLDOWN"
    NO_USES_REMAINING = "NO_USES_REMAINING"
    REQUIREMENTS_NOT_MET = "REQUIREMENTS_NOT_MET"
    CONDITIONS_NOT_MET = "CONDITIONS_NOT_MET"
    ABILITY_LIMIT_REACHED = "ABILITY_LIMIT_REACHED"
    GLOBAL_COOLDOWN = "GLOBAL_COOLDOWN"


@dataclass(frozen=True, slots=True)
class ValidationError:
    """One coded rejection reason."""

    code: ErrorCode
    message: str
    field: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Validation verdict with blocking errors and non-blocking warnings."""

    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def codes(self) -> tuple[ErrorCode, ...]:
        return tuple(error.code for error in self.errors)

    @classmethod
    def ok(cls, warnings: tuple[str, ...] = ()) -> ValidationResult:
        return cls(errors=(), warnings=warnings)

    @classmethod
    def fail(cls, code: ErrorCode, message: str, field: str | None = None) -> ValidationResult:
        return cls(errors=(ValidationError(code, message, field),))


class ConfigurationError(ValueError):
    """Raised when static registries or settings are malformed."""
