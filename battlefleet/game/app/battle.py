"""One game's state and the operations players and AI seats drive it with."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from threading import RLock

from battlefleet.game.abilities.factory import AbilityFactory
from battlefleet.game.abilities.models import AbilityExecutionResult, ActiveEffect, Trigger
from battlefleet.game.abilities.processor import AbilityProcessor, ProcessorConfig
from battlefleet.game.ai.context import (
    AbilityAction,
    AttackAction,
    BehaviorProfile,
    PlacementAction,
    StrategyResult,
)
from battlefleet.game.ai.memory import MemorySnapshot
from battlefleet.game.ai.player import AIPlayer
from battlefleet.game.catalog.standard import STANDARD_FLEET
from battlefleet.game.combat.resolver import AttackResult, CombatResolver
from battlefleet.game.combat.statistics import CombatStatistics
from battlefleet.game.combat.validator import (
    ACTION_ABILITY,
    ACTION_ATTACK,
    AttackRequest,
    CombatValidator,
    RateLimiter,
    validate_turn_action,
)
from battlefleet.game.combat.win_conditions import GameOutcome, evaluate
from battlefleet.game.core.errors import ErrorCode, ValidationResult
from battlefleet.game.core.fleet import build_fleet, validate_fleet
from battlefleet.game.core.models import Coord, GamePhase, GameStatus, ShipPlacement, ShipType
from battlefleet.game.core.rules import GameSession, advance_turn, create_session, finish_game, start_battle
from battlefleet.game.infra.config import BattleSettings

logger = logging.getLogger(__name__)

ACTION_END_TURN = "end_turn"


@dataclass(slots=True)
class AITurnReport:
    """Decisions an AI seat made in one turn and what they produced."""

    player_id: str
    ability_decision: StrategyResult | None = None
    ability_result: AbilityExecutionResult | None = None
    attack_decision: StrategyResult | None = None
    attack_result: AttackResult | None = None


class Battle:
    """Owns one game session and every component acting on it.

    Public operations run under one re-entrant lock and either commit fully or
    leave the game untouched.
    """

    def __init__(
        self,
        game_id: str,
        player_ids: tuple[str, str],
        settings: BattleSettings | None = None,
        *,
        rng: random.Random | None = None,
        factory: AbilityFactory | None = None,
        required_ships: int | None = None,
    ) -> None:
        self.settings = settings or BattleSettings()
        self._lock = RLock()
        self._rng = rng or random.Random(self.settings.seed)
        self._factory = factory or AbilityFactory(max_abilities_per_ship=self.settings.max_abilities_per_ship)
        self._required_ships = required_ships
        self.session: GameSession = create_session(
            game_id, player_ids, self.settings.board_width, self.settings.board_height
        )
        self.processor = AbilityProcessor(
            self._factory,
            self.session,
            ProcessorConfig(
                max_abilities_per_turn=self.settings.max_abilities_per_turn,
                global_cooldown_turns=self.settings.global_cooldown_turns,
            ),
        )
        self.rate_limiter = RateLimiter(
            {
                ACTION_ATTACK: self.settings.attacks_per_turn,
                ACTION_ABILITY: self.settings.ability_actions_per_turn,
            }
        )
        self.validator = CombatValidator(self.settings.turn_time_limit_seconds)
        self.resolver = CombatResolver(
            self.processor,
            self.validator,
            self.rate_limiter,
            CombatStatistics(),
            self.settings.area_damage_multiplier,
        )
        self._ai: dict[str, AIPlayer] = {}

    @property
    def statistics(self) -> CombatStatistics:
        return self.resolver.statistics

    def add_ai(
        self,
        player_id: str,
        difficulty: str | None = None,
        behavior: BehaviorProfile | None = None,
    ) -> AIPlayer:
        """Seat an AI opponent for ``player_id``."""
        if not self.session.has_player(player_id):
            raise KeyError(player_id)
        player = AIPlayer(player_id, self._rng, difficulty or self.settings.ai_difficulty, behavior)
        self._ai[player_id] = player
        return player

    def ai_player(self, player_id: str) -> AIPlayer | None:
        return self._ai.get(player_id)

    def place_fleet(self, player_id: str, placements: Sequence[ShipPlacement]) -> ValidationResult:
        """Validate and commit one player's finalized fleet."""
        with self._lock:
            session = self.session
            if not session.has_player(player_id):
                return ValidationResult.fail(ErrorCode.UNKNOWN_PLAYER, f"Unknown player '{player_id}'.")
            if session.phase is not GamePhase.PLACEMENT:
                return ValidationResult.fail(
                    ErrorCode.NOT_PLACEMENT_PHASE, "Fleets can only be placed before the battle starts."
                )
            if session.ships_of(player_id):
                return ValidationResult.fail(
                    ErrorCode.INVALID_PLACEMENT, f"{player_id} has already placed a fleet."
                )
            taken = [placement.ship_id for placement in placements if placement.ship_id in session.ships]
            if taken:
                return ValidationResult.fail(
                    ErrorCode.INVALID_PLACEMENT, f"Ship id already in use: {taken[0]}.", taken[0]
                )
            board = session.board_of(player_id)
            verdict = validate_fleet(placements, board, self._required_ships)
            if not verdict.is_valid:
                return verdict

            for ship in build_fleet(player_id, placements, board):
                session.ships[ship.id] = ship
                self.processor.register_ship(ship)
            if session.status is GameStatus.WAITING:
                session.status = GameStatus.ACTIVE
            logger.info(
                "fleet_placed",
                extra={"game_id": session.game_id, "player_id": player_id, "ships": len(placements)},
            )
            return verdict

    def auto_place_fleet(
        self,
        player_id: str,
        ship_types: Sequence[ShipType] = STANDARD_FLEET,
    ) -> tuple[StrategyResult, ValidationResult]:
        """Let the placement strategies lay out a fleet, then commit it."""
        with self._lock:
            player = self._ai.get(player_id) or AIPlayer(player_id, self._rng, self.settings.ai_difficulty)
            decision = player.choose_placement(ship_types, self.session.width, self.session.height)
            if not isinstance(decision.action, PlacementAction):
                return decision, ValidationResult.fail(ErrorCode.INVALID_PLACEMENT, "No placement produced.")
            return decision, self.place_fleet(player_id, decision.action.placements)

    def start(self, first_player: str | None = None) -> ValidationResult:
        """Enter the battle phase once both fleets are placed."""
        with self._lock:
            session = self.session
            if session.phase is not GamePhase.PLACEMENT:
                return ValidationResult.fail(ErrorCode.NOT_PLACEMENT_PHASE, "Battle has already started.")
            if first_player is not None and not session.has_player(first_player):
                return ValidationResult.fail(ErrorCode.UNKNOWN_PLAYER, f"Unknown player '{first_player}'.")
            missing = [player_id for player_id in session.player_ids if not session.ships_of(player_id)]
            if missing:
                return ValidationResult.fail(
                    ErrorCode.INVALID_PLACEMENT, f"{missing[0]} has not placed a fleet."
                )
            start_battle(session, first_player)
            for player_id in session.player_ids:
                self.processor.activate_passives(player_id)
            self.processor.process_triggered(Trigger.ON_TURN_START, session.current_player)
            logger.info(
                "battle_started",
                extra={"game_id": session.game_id, "first_player": session.current_player},
            )
            return ValidationResult.ok()

    def attack(self, request: AttackRequest) -> AttackResult:
        """Resolve an attack; the turn ends once the player's attack quota is spent."""
        with self._lock:
            result = self.resolver.attack(self.session, request)
            if not result.accepted:
                return result
            player = self._ai.get(request.player_id)
            if player is not None:
                player.observe(result, self.session.turn_number)
            if self._check_outcome().finished:
                return result
            if not self.rate_limiter.allows(request.player_id, ACTION_ATTACK, self.session.turn_number):
                self._end_turn()
            return result

    def use_ability(
        self,
        player_id: str,
        ship_id: str,
        ability_id: str,
        target: Coord | None = None,
        *,
        elapsed_seconds: float | None = None,
    ) -> AbilityExecutionResult:
        """Activate a ship ability during the player's own turn."""
        with self._lock:
            verdict = validate_turn_action(
                self.session,
                player_id,
                ACTION_ABILITY,
                self.rate_limiter,
                elapsed_seconds=elapsed_seconds,
                turn_time_limit=self.validator.turn_time_limit,
            )
            if not verdict.is_valid:
                return AbilityExecutionResult.rejected(ability_id, ship_id, verdict.errors[0])
            result = self.processor.activate(player_id, ship_id, ability_id, target)
            if result.success:
                self.rate_limiter.record(player_id, ACTION_ABILITY, self.session.turn_number)
            return result

    def end_turn(self, player_id: str) -> ValidationResult:
        """Pass the turn without spending the remaining attack quota."""
        with self._lock:
            verdict = validate_turn_action(self.session, player_id, ACTION_END_TURN, self.rate_limiter)
            if not verdict.is_valid:
                return verdict
            self._end_turn()
            return verdict

    def play_ai_turn(self, player_id: str | None = None) -> AITurnReport:
        """Let an AI seat use at most one ability and then fire."""
        with self._lock:
            seat = player_id or self.session.current_player
            player = self._ai.get(seat) or self.add_ai(seat)
            report = AITurnReport(seat)
            if self.session.phase is GamePhase.BATTLE and player.settings.use_abilities:
                report.ability_decision = player.choose_ability(self.session, self.processor)
                action = report.ability_decision.action
                if isinstance(action, AbilityAction):
                    report.ability_result = self.use_ability(
                        seat, action.ship_id, action.ability_id, action.target
                    )

            report.attack_decision = player.choose_attack(self.session)
            attack = report.attack_decision.action
            if isinstance(attack, AttackAction):
                report.attack_result = self.attack(AttackRequest(seat, attack.target))
            return report

    def memory_snapshot(self, player_id: str) -> MemorySnapshot:
        with self._lock:
            player = self._ai.get(player_id)
            if player is None:
                raise KeyError(player_id)
            return player.memory.snapshot()

    def effects_for_ship(self, ship_id: str) -> list[ActiveEffect]:
        with self._lock:
            return self.processor.effects_for_ship(ship_id)

    def outcome(self) -> GameOutcome:
        with self._lock:
            return evaluate(self.session, self.settings.max_turns)

    def reset(self) -> None:
        """Discard the current game and start an empty one with the same seats."""
        with self._lock:
            self.session = create_session(
                self.session.game_id,
                self.session.player_ids,
                self.settings.board_width,
                self.settings.board_height,
            )
            self.processor.reset(self.session)
            self.rate_limiter.reset()
            self.statistics.reset()
            for player in self._ai.values():
                player.reset()
            logger.info("battle_reset game_id=%s", self.session.game_id)

    def _end_turn(self) -> list[ActiveEffect]:
        session = self.session
        player_id = session.current_player
        self.processor.process_triggered(Trigger.ON_TURN_END, player_id)
        expired = self.processor.update_turn_end(player_id)
        session.board_of(session.opponent_of(player_id)).tick_reveals()
        next_player = advance_turn(session)
        if not self._check_outcome().finished:
            self.processor.process_triggered(Trigger.ON_TURN_START, next_player)
        logger.debug(
            "turn_ended player=%s next=%s turn=%s expired=%s",
            player_id,
            next_player,
            session.turn_number,
            len(expired),
        )
        return expired

    def _check_outcome(self) -> GameOutcome:
        outcome = evaluate(self.session, self.settings.max_turns)
        if outcome.finished and self.session.status is not GameStatus.FINISHED:
            finish_game(self.session, outcome.winner, draw=outcome.is_draw, reason=outcome.reason)
            logger.info(
                "game_finished",
                extra={
                    "game_id": self.session.game_id,
                    "winner": outcome.winner,
                    "draw": outcome.is_draw,
                    "reason": outcome.reason,
                },
            )
        return outcome
