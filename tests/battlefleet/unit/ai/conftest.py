from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from battlefleet.game.ai.context import AIContext, Difficulty
from battlefleet.game.ai.difficulty import settings_for
from battlefleet.game.ai.memory import AIMemory
from battlefleet.game.combat.resolver import AttackResult
from battlefleet.game.core.models import AttackOutcome, Coord

ContextBuilder = Callable[..., AIContext]


@pytest.fixture
def make_context() -> ContextBuilder:
    def build(
        difficulty: Difficulty = Difficulty.INTERMEDIATE,
        *,
        memory: AIMemory | None = None,
        seed: int = 7,
        width: int = 10,
        height: int = 10,
        **overrides,
    ) -> AIContext:
        return AIContext(
            player_id="p1",
            memory=memory or AIMemory(),
            settings=settings_for(difficulty),
            rng=random.Random(seed),
            width=width,
            height=height,
            **overrides,
        )

    return build


@pytest.fixture
def record_shot() -> Callable[..., None]:
    def record(
        memory: AIMemory,
        coord: Coord,
        outcome: AttackOutcome = AttackOutcome.MISS,
        ship_id: str | None = None,
        *,
        sunk_size: int | None = None,
        turn: int = 1,
    ) -> None:
        memory.record_attack(
            AttackResult(
                coordinate=coord,
                outcome=outcome,
                ship_id=ship_id,
                ship_sunk=outcome is AttackOutcome.SUNK,
                sunk_ship_size=sunk_size,
            ),
            turn,
        )

    return record
