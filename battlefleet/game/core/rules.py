"""Game session state and turn rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from battlefleet.game.core.board import Board
from battlefleet.game.core.models import BOARD_HEIGHT, BOARD_WIDTH, GamePhase, GameStatus
from battlefleet.game.core.ship import Ship

if TYPE_CHECKING:
    from battlefleet.game.abilities.models import AbilityInstance


@dataclass(slots=True)
class GameSession:
    """Runtime state of one two-player game.

    Ships and ability instances are owned here and referenced elsewhere by id.
    """

    game_id: str
    player_ids: tuple[str, str]
    boards: dict[str, Board]
    ships: dict[str, Ship] = field(default_factory=dict)
    abilities: dict[str, AbilityInstance] = field(default_factory=dict)
    status: GameStatus = GameStatus.WAITING
    phase: GamePhase = GamePhase.PLACEMENT
    current_player: str = ""
    turn_number: int = 1
    winner: str | None = None
    is_draw: bool = False
    history: list[str] = field(default_factory=list)

    def has_player(self, player_id: str) -> bool:
        return player_id in self.player_ids

    def opponent_of(self, player_id: str) -> str:
        first, second = self.player_ids
        if player_id == first:
            return second
        if player_id == second:
            return first
        raise KeyError(player_id)

    def board_of(self, player_id: str) -> Board:
        return self.boards[player_id]

    def ships_of(self, player_id: str) -> list[Ship]:
        return [ship for ship in self.ships.values() if ship.player_id == player_id]

    def fleet_destroyed(self, player_id: str) -> bool:
        fleet = self.ships_of(player_id)
        return bool(fleet) and all(ship.is_sunk for ship in fleet)

    @property
    def width(self) -> int:
        return self.boards[self.player_ids[0]].width

    @property
    def height(self) -> int:
        return self.boards[self.player_ids[0]].height


def create_session(
    game_id: str,
    player_ids: tuple[str, str],
    width: int = BOARD_WIDTH,
    height: int = BOARD_HEIGHT,
) -> GameSession:
    """Create an empty session waiting for fleet placement."""
    if len(player_ids) != 2 or player_ids[0] == player_ids[1]:
        raise ValueError("A game needs exactly two distinct players.")
    boards = {
        player_id: Board(width=width, height=height, owner_id=player_id) for player_id in player_ids
    }
    return GameSession(game_id=game_id, player_ids=tuple(player_ids), boards=boards)


def start_battle(session: GameSession, first_player: str | None = None) -> None:
    """Move a placed session into the battle phase."""
    session.status = GameStatus.ACTIVE
    session.phase = GamePhase.BATTLE
    session.current_player = first_player or session.player_ids[0]
    session.turn_number = 1
    session.history.append(f"Battle started. {session.current_player} fires first.")


def advance_turn(session: GameSession) -> str:
    """Pass the turn to the opponent and return the new current player."""
    session.current_player = session.opponent_of(session.current_player)
    session.turn_number += 1
    return session.current_player


def finish_game(session: GameSession, winner: str | None, *, draw: bool, reason: str) -> None:
    session.status = GameStatus.FINISHED
    session.phase = GamePhase.ENDED
    session.winner = winner
    session.is_draw = draw
    session.history.append(reason)
