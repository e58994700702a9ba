"""Fleet placement validation and construction."""

from __future__ import annotations

from collections.abc import Sequence

from battlefleet.game.core.board import Board
from battlefleet.game.core.errors import ErrorCode, ValidationError, ValidationResult
from battlefleet.game.core.models import ShipPlacement, cells_for_placement
from battlefleet.game.core.ship import Ship


def validate_fleet(
    placements: Sequence[ShipPlacement],
    board: Board,
    required_ships: int | None = None,
) -> ValidationResult:
    """Validate placements against a board without mutating it.

    Overlaps, out-of-bounds cells and duplicate ids are errors. A fleet with
    more ships than required is accepted with a warning.
    """
    errors: list[ValidationError] = []
    warnings: list[str] = []
    seen_ids: set[str] = set()
    occupied: set[tuple[int, int]] = set()

    if not placements:
        return ValidationResult.fail(ErrorCode.INVALID_PLACEMENT, "Fleet must contain at least one ship.")

    for placement in placements:
        if placement.ship_id in seen_ids:
            errors.append(
                ValidationError(
                    ErrorCode.INVALID_PLACEMENT,
                    f"Duplicate ship id: {placement.ship_id}.",
                    placement.ship_id,
                )
            )
            continue
        seen_ids.add(placement.ship_id)
        cells = cells_for_placement(placement)
        if not board.can_place(cells):
            errors.append(
                ValidationError(
                    ErrorCode.INVALID_PLACEMENT,
                    f"Ship {placement.ship_id} is out of bounds or overlaps an existing ship.",
                    placement.ship_id,
                )
            )
            continue
        keys = {(cell.x, cell.y) for cell in cells}
        if keys & occupied:
            errors.append(
                ValidationError(
                    ErrorCode.INVALID_PLACEMENT,
                    f"Ship {placement.ship_id} overlaps another ship.",
                    placement.ship_id,
                )
            )
            continue
        occupied |= keys

    if required_ships is not None:
        if len(placements) < required_ships:
            errors.append(
                ValidationError(
                    ErrorCode.INVALID_PLACEMENT,
                    f"Fleet is missing {required_ships - len(placements)} ship(s).",
                )
            )
        elif len(placements) > required_ships:
            warnings.append(
                f"More ships placed than required ({len(placements)} > {required_ships})."
            )
    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))


def build_fleet(player_id: str, placements: Sequence[ShipPlacement], board: Board) -> list[Ship]:
    """Place a validated fleet on ``board`` and create its ships."""
    verdict = validate_fleet(placements, board)
    if not verdict.is_valid:
        raise ValueError(verdict.errors[0].message)
    ships: list[Ship] = []
    for placement in placements:
        cells = cells_for_placement(placement)
        board.place_ship(placement.ship_id, cells)
        ships.append(
            Ship(
                id=placement.ship_id,
                player_id=player_id,
                ship_type=placement.ship_type,
                cells=tuple(cells),
            )
        )
    return ships
