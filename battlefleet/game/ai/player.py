"""AI opponent: memory, threat assessment and per-turn decisions."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from battlefleet.game.abilities.models import AbilityType
from battlefleet.game.abilities.processor import AbilityProcessor
from battlefleet.game.ai.context import (
    AbilityOption,
    AIContext,
    AttackAction,
    BehaviorProfile,
    Difficulty,
    DifficultySettings,
    StrategyKind,
    StrategyResult,
)
from battlefleet.game.ai.difficulty import settings_for
from battlefleet.game.ai.factory import StrategyFactory
from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.combat.resolver import AttackResult
from battlefleet.game.core.models import Coord, ShipType
from battlefleet.game.core.rules import GameSession

logger = logging.getLogger(__name__)

_STABLE_PROFILES = (BehaviorProfile.AGGRESSIVE, BehaviorProfile.DEFENSIVE, BehaviorProfile.BALANCED)


def default_behavior(settings: DifficultySettings) -> BehaviorProfile:
    if settings.aggressiveness > settings.defensiveness:
        return BehaviorProfile.AGGRESSIVE
    if settings.defensiveness > settings.aggressiveness:
        return BehaviorProfile.DEFENSIVE
    return BehaviorProfile.BALANCED


class AIPlayer:
    """Decision-making agent for one seat in a battle."""

    def __init__(
        self,
        player_id: str,
        rng: random.Random,
        difficulty: str | Difficulty = Difficulty.INTERMEDIATE,
        behavior: BehaviorProfile | None = None,
        factory: StrategyFactory | None = None,
    ) -> None:
        self.player_id = player_id
        self.settings = settings_for(difficulty)
        self.behavior = behavior or default_behavior(self.settings)
        self.memory = AIMemory()
        self._rng = rng
        self._factory = factory or StrategyFactory()

    def assess_threat(self, session: GameSession) -> float:
        """Fraction of own fleet hit points already lost."""
        fleet = session.ships_of(self.player_id)
        total = sum(ship.max_hit_points for ship in fleet)
        if total == 0:
            return 0.0
        return 1.0 - sum(ship.hit_points for ship in fleet) / total

    def critical_ships(self, session: GameSession) -> list[str]:
        return [ship.id for ship in session.ships_of(self.player_id) if ship.is_damaged and not ship.is_sunk]

    def _turn_behavior(self) -> BehaviorProfile:
        if self.behavior is BehaviorProfile.UNPREDICTABLE:
            return self._rng.choice(_STABLE_PROFILES)
        return self.behavior

    def build_context(
        self,
        width: int,
        height: int,
        *,
        session: GameSession | None = None,
        processor: AbilityProcessor | None = None,
        ships_to_place: Sequence[ShipType] = (),
    ) -> AIContext:
        return AIContext(
            player_id=self.player_id,
            memory=self.memory,
            settings=self.settings,
            rng=self._rng,
            width=width,
            height=height,
            behavior=self._turn_behavior(),
            turn_number=session.turn_number if session is not None else 1,
            threat_level=self.assess_threat(session) if session is not None else 0.0,
            ships_to_place=tuple(ships_to_place),
            abilities=self._ability_options(session, processor),
        )

    def _ability_options(
        self,
        session: GameSession | None,
        processor: AbilityProcessor | None,
    ) -> tuple[AbilityOption, ...]:
        if session is None or processor is None:
            return ()
        options: list[AbilityOption] = []
        for instance in processor.instances_for_player(self.player_id):
            definition = processor.factory.get_definition(instance.definition_id)
            if definition is None or definition.type is AbilityType.TRIGGERED:
                continue
            sample = Coord(0, 0) if definition.requires_target else None
            if not processor.validate(self.player_id, instance.ship_id, definition.id, sample).can_activate:
                continue
            options.append(
                AbilityOption(
                    ship_id=instance.ship_id,
                    ability_id=definition.id,
                    name=definition.name,
                    requires_target=definition.requires_target,
                )
            )
        return tuple(options)

    def choose_placement(self, ship_types: Sequence[ShipType], width: int, height: int) -> StrategyResult:
        context = self.build_context(width, height, ships_to_place=ship_types)
        return self._factory.execute(StrategyKind.PLACEMENT, context)

    def choose_attack(self, session: GameSession) -> StrategyResult:
        context = self.build_context(session.width, session.height, session=session)
        result = self._factory.execute(StrategyKind.TARGETING, context)
        if self._rng.random() < self.settings.mistake_probability:
            open_cells = context.unshot_cells()
            if open_cells:
                slip = self._rng.choice(open_cells)
                result.reasoning.append(f"Misjudged the shot and fired at ({slip.x}, {slip.y}) instead.")
                if result.action is not None:
                    result.alternatives.insert(0, result.action)
                result.action = AttackAction(slip)
                result.confidence = min(result.confidence, 0.2)
        return result

    def choose_ability(self, session: GameSession, processor: AbilityProcessor) -> StrategyResult:
        context = self.build_context(session.width, session.height, session=session, processor=processor)
        if not self.settings.use_abilities:
            return StrategyResult(None, 0.0, ["Abilities disabled at this difficulty."], strategy_name="none")
        return self._factory.execute(StrategyKind.ABILITY, context)

    def observe(self, result: AttackResult, turn: int) -> None:
        self.memory.record_attack(result, turn)

    def reset(self) -> None:
        self.memory.reset()
        logger.debug("ai_memory_reset player=%s", self.player_id)
