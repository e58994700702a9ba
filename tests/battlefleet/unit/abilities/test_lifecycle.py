from battlefleet.game.abilities import lifecycle
from battlefleet.game.abilities.definitions import ALL_BIG_GUNS, ARMOR_PIERCING
from battlefleet.game.abilities.factory import AbilityFactory
from battlefleet.game.abilities.models import AbilityContext, AbilityState
from battlefleet.game.catalog.standard import BATTLESHIP
from battlefleet.game.core.errors import ErrorCode
from battlefleet.game.core.models import Coord, Orientation, placement_cells
from battlefleet.game.core.rules import create_session
from battlefleet.game.core.ship import Ship


def _battleship_context(ability_id: str = "all_big_guns"):
    factory = AbilityFactory()
    session = create_session("g", ("p1", "p2"))
    ship = Ship("p1_bb", "p1", BATTLESHIP, tuple(placement_cells(Coord(0, 2), 4, Orientation.HORIZONTAL)))
    session.ships[ship.id] = ship
    session.board_of("p1").place_ship(ship.id, list(ship.cells))
    instance = factory.create_instance(ability_id, ship)
    session.abilities[instance.id] = instance
    ship.ability_ids = [instance.id]
    return factory, instance, AbilityContext(session=session, ship=ship, turn_number=1)


def test_cooldown_and_uses_follow_activation_cycle() -> None:
    factory, instance, context = _battleship_context()
    behavior = factory.behavior("all_big_guns")

    first = lifecycle.activate(ALL_BIG_GUNS, instance, context, behavior)
    assert first.success
    assert instance.current_cooldown == 3
    assert instance.remaining_uses == 1
    assert instance.times_used == 1
    assert instance.last_used_turn == 1

    retry = lifecycle.activate(ALL_BIG_GUNS, instance, context, behavior)
    assert not retry.success
    assert retry.errors[0].code is ErrorCode.ABILITY_ON_COOLDOWN
    assert instance.current_cooldown == 3
    assert instance.remaining_uses == 1

    for expected in (2, 1, 0):
        lifecycle.update_turn_end(instance)
        assert instance.current_cooldown == expected
    assert instance.remaining_uses == 1

    second = lifecycle.activate(ALL_BIG_GUNS, instance, context, behavior)
    assert second.success
    assert instance.remaining_uses == 0


def test_exhausted_ability_reports_no_uses_remaining() -> None:
    factory, instance, context = _battleship_context()
    instance.remaining_uses = 0
    verdict = lifecycle.validate(ALL_BIG_GUNS, instance, context, factory.behavior("all_big_guns"))
    assert verdict.code is ErrorCode.NO_USES_REMAINING
    assert instance.state() is AbilityState.EXHAUSTED


def test_cooldown_never_drops_below_zero() -> None:
    _, instance, _ = _battleship_context()
    lifecycle.update_turn_end(instance)
    lifecycle.update_turn_end(instance)
    assert instance.current_cooldown == 0
    assert instance.state() is AbilityState.READY


def test_sunk_ship_is_reported_before_inactive_instance() -> None:
    factory, instance, context = _battleship_context()
    context.ship.is_sunk = True
    instance.is_active = False
    verdict = lifecycle.validate(ALL_BIG_GUNS, instance, context, factory.behavior("all_big_guns"))
    assert not verdict.can_activate
    assert verdict.code is ErrorCode.SHIP_SUNK
    assert instance.state(ship_sunk=True) is AbilityState.DISABLED


def test_requirements_checked_against_ship() -> None:
    factory, instance, context = _battleship_context("armor_piercing")
    verdict = lifecycle.validate(ARMOR_PIERCING, instance, context, factory.behavior("armor_piercing"))
    assert verdict.code is ErrorCode.REQUIREMENTS_NOT_MET


def test_effects_without_duration_survive_turn_end() -> None:
    factory, instance, context = _battleship_context()
    lifecycle.activate(ALL_BIG_GUNS, instance, context, factory.behavior("all_big_guns"))
    expired = lifecycle.update_turn_end(instance)
    assert expired == []
    assert [effect.magnitude for effect in instance.active_effects] == [1.5]
