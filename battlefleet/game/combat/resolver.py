"""Attack resolution over the damage modifier pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from battlefleet.game.abilities.effects import stealth_resistance
from battlefleet.game.abilities.models import AbilityExecutionResult, EffectType, Trigger
from battlefleet.game.abilities.processor import AbilityProcessor
from battlefleet.game.combat.damage import DEFAULT_AREA_MULTIPLIER, base_damage, compute_damage
from battlefleet.game.combat.patterns import effective_pattern, pattern_cells
from battlefleet.game.combat.statistics import CombatStatistics
from battlefleet.game.combat.validator import ACTION_ATTACK, AttackRequest, CombatValidator, RateLimiter
from battlefleet.game.core.board import Board
from battlefleet.game.core.errors import ValidationError
from battlefleet.game.core.models import AttackOutcome, AttackPattern, Coord
from battlefleet.game.core.rules import GameSession

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AttackResult:
    """Outcome of one attack; area attacks carry per-cell results in ``chain_reaction``."""

    coordinate: Coord
    outcome: AttackOutcome
    ship_id: str | None = None
    ship_sunk: bool = False
    damage_dealt: int = 0
    sunk_ship_size: int | None = None
    chain_reaction: list[AttackResult] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    triggered_abilities: list[AbilityExecutionResult] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return not self.errors

    def cell_results(self) -> list[AttackResult]:
        """Per-cell results: the chain for area attacks, otherwise this result."""
        return list(self.chain_reaction) if self.chain_reaction else [self]

    @classmethod
    def rejected(cls, coordinate: Coord, errors: tuple[ValidationError, ...]) -> AttackResult:
        return cls(coordinate=coordinate, outcome=AttackOutcome.MISS, errors=list(errors))


@dataclass(frozen=True, slots=True)
class _Modifiers:
    base: int
    boost: float
    penetration: float
    area_multiplier: float | None


class CombatResolver:
    """Validates then resolves attacks. Rejections leave all state untouched."""

    def __init__(
        self,
        processor: AbilityProcessor,
        validator: CombatValidator,
        rate_limiter: RateLimiter,
        statistics: CombatStatistics | None = None,
        area_multiplier: float = DEFAULT_AREA_MULTIPLIER,
    ) -> None:
        self._processor = processor
        self._validator = validator
        self._rate_limiter = rate_limiter
        self._statistics = statistics or CombatStatistics()
        self._area_multiplier = area_multiplier

    @property
    def statistics(self) -> CombatStatistics:
        return self._statistics

    def attack(self, session: GameSession, request: AttackRequest) -> AttackResult:
        verdict = self._validator.validate_attack(session, request, self._rate_limiter)
        if not verdict.is_valid:
            logger.debug(
                "attack_rejected player=%s target=%s,%s code=%s",
                request.player_id,
                request.target.x,
                request.target.y,
                verdict.errors[0].code,
            )
            return AttackResult.rejected(request.target, verdict.errors)

        result = self._resolve(session, request)
        result.warnings.extend(verdict.warnings)
        self._rate_limiter.record(request.player_id, ACTION_ATTACK, session.turn_number)
        self._statistics.record(request.player_id, result)
        logger.info(
            "attack_resolved",
            extra={
                "game_id": session.game_id,
                "player_id": request.player_id,
                "target": [request.target.x, request.target.y],
                "outcome": str(result.outcome),
                "ship_id": result.ship_id,
                "damage": result.damage_dealt,
                "turn": session.turn_number,
            },
        )
        return result

    def _resolve(self, session: GameSession, request: AttackRequest) -> AttackResult:
        attacker = request.player_id
        defender = session.opponent_of(attacker)
        board = session.board_of(defender)
        pattern = effective_pattern(request.kind, request.pattern)

        if pattern is AttackPattern.SINGLE and board.is_hit(request.target):
            return AttackResult(coordinate=request.target, outcome=AttackOutcome.MISS)

        triggered: list[AbilityExecutionResult] = []
        if request.firing_ship_id is not None:
            ship = session.ships[request.firing_ship_id]
            ship.has_fired = True
            if self._processor.remove_effects(ship.id, EffectType.STEALTH):
                logger.info("stealth_broken ship=%s", ship.id)
        triggered.extend(self._processor.process_triggered(Trigger.ON_ATTACK, attacker))

        boost = self._processor.consume_effect(attacker, EffectType.DAMAGE_BOOST, request.firing_ship_id)
        modifiers = _Modifiers(
            base=base_damage(request.kind),
            boost=boost if boost > 0 else 1.0,
            penetration=self._processor.player_effect_magnitude(
                attacker, EffectType.ARMOR_PIERCING, request.firing_ship_id
            ),
            area_multiplier=None if pattern is AttackPattern.SINGLE else self._area_multiplier,
        )

        if pattern is AttackPattern.SINGLE:
            result = self._resolve_cell(session, board, defender, request.target, modifiers)
            result.triggered_abilities[:0] = triggered
            return result

        detection = self._processor.player_effect_magnitude(attacker, EffectType.DETECTION)
        chain: list[AttackResult] = []
        concealed = 0
        for cell in pattern_cells(board, request.target, pattern, request.direction):
            ship_id = board.ship_at(cell)
            if ship_id is not None and not board.is_hit(cell):
                resistance = stealth_resistance(session, ship_id)
                if resistance > 0 and detection <= resistance:
                    concealed += 1
                    continue
            chain.append(self._resolve_cell(session, board, defender, cell, modifiers))
        composite = _compose(request.target, chain)
        composite.triggered_abilities[:0] = triggered
        if concealed:
            composite.warnings.append(f"{concealed} cell(s) concealed by stealth were not targeted.")
        return composite

    def _resolve_cell(
        self,
        session: GameSession,
        board: Board,
        defender: str,
        coord: Coord,
        modifiers: _Modifiers,
    ) -> AttackResult:
        if board.is_hit(coord):
            return AttackResult(coordinate=coord, outcome=AttackOutcome.MISS)

        ship_id = board.ship_at(coord)
        if ship_id is None:
            board.mark_hit(coord)
            return AttackResult(coordinate=coord, outcome=AttackOutcome.MISS)

        ship = session.ships[ship_id]
        breakdown = compute_damage(
            modifiers.base,
            armor=ship.armor,
            boost=modifiers.boost,
            penetration=modifiers.penetration,
            area_multiplier=modifiers.area_multiplier,
        )
        before = ship.hit_points
        sank = ship.apply_damage(coord, breakdown.final, session.turn_number)
        board.mark_hit(coord)
        dealt = before - ship.hit_points
        result = AttackResult(
            coordinate=coord, outcome=AttackOutcome.HIT, ship_id=ship_id, damage_dealt=dealt
        )
        if before == 0:
            result.warnings.append(f"{ship_id} was already sunk.")

        if sank:
            self._processor.disable_ship(ship_id)
            result.outcome = AttackOutcome.SUNK
            result.ship_sunk = True
            result.sunk_ship_size = ship.size
            session.history.append(f"{ship_id} sunk on turn {session.turn_number}.")
            logger.info("ship_sunk ship=%s player=%s turn=%s", ship_id, defender, session.turn_number)
            result.triggered_abilities.extend(
                self._processor.process_triggered(Trigger.ON_SHIP_SUNK, defender)
            )
        elif dealt > 0:
            result.triggered_abilities.extend(
                self._processor.process_triggered(
                    Trigger.ON_DAMAGE, defender, ship_ids=(ship_id,), damage_taken=dealt
                )
            )
        return result


def _compose(center: Coord, chain: list[AttackResult]) -> AttackResult:
    if any(cell.outcome is AttackOutcome.SUNK for cell in chain):
        outcome = AttackOutcome.SUNK
    elif any(cell.outcome is AttackOutcome.HIT for cell in chain):
        outcome = AttackOutcome.HIT
    else:
        outcome = AttackOutcome.MISS
    first_ship = next((cell.ship_id for cell in chain if cell.ship_id is not None), None)
    return AttackResult(
        coordinate=center,
        outcome=outcome,
        ship_id=first_ship,
        ship_sunk=any(cell.ship_sunk for cell in chain),
        damage_dealt=sum(cell.damage_dealt for cell in chain),
        chain_reaction=chain,
    )
