from battlefleet.game.app.battle import Battle
from battlefleet.game.catalog.standard import DESTROYER
from battlefleet.game.combat.validator import AttackRequest
from battlefleet.game.combat.win_conditions import evaluate
from battlefleet.game.core.errors import ErrorCode
from battlefleet.game.core.models import Coord, GamePhase, GameStatus
from battlefleet.game.core.rules import GameSession, create_session
from battlefleet.game.core.ship import Ship
from battlefleet.game.infra.config import BattleSettings


def _session_with_destroyers() -> GameSession:
    session = create_session("g", ("p1", "p2"))
    for player_id in session.player_ids:
        ship = Ship(f"{player_id}_dd", player_id, DESTROYER, (Coord(0, 0), Coord(1, 0)))
        session.ships[ship.id] = ship
    return session


def test_game_continues_while_both_fleets_float() -> None:
    assert not evaluate(_session_with_destroyers()).finished


def test_last_fleet_afloat_wins() -> None:
    session = _session_with_destroyers()
    session.ships["p1_dd"].is_sunk = True
    outcome = evaluate(session)
    assert outcome.finished
    assert outcome.winner == "p2"
    assert not outcome.is_draw


def test_mutual_destruction_is_a_draw() -> None:
    session = _session_with_destroyers()
    for ship in session.ships.values():
        ship.is_sunk = True
    outcome = evaluate(session)
    assert outcome.is_draw
    assert outcome.winner is None


def test_empty_fleets_never_count_as_destroyed() -> None:
    assert not evaluate(create_session("g", ("p1", "p2"))).finished


def test_turn_limit_ends_in_draw(seeded_rng, fleet_factory) -> None:
    battle = Battle("g", ("p1", "p2"), BattleSettings(max_turns=2), rng=seeded_rng)
    battle.place_fleet("p1", fleet_factory("p1"))
    battle.place_fleet("p2", fleet_factory("p2"))
    battle.start("p1")
    battle.attack(AttackRequest("p1", Coord(9, 9)))
    assert battle.session.status is GameStatus.ACTIVE
    battle.attack(AttackRequest("p2", Coord(9, 9)))
    assert battle.session.status is GameStatus.FINISHED
    assert battle.session.phase is GamePhase.ENDED
    assert battle.session.is_draw
    late = battle.attack(AttackRequest("p1", Coord(5, 5)))
    assert late.errors[0].code is ErrorCode.GAME_NOT_ACTIVE
