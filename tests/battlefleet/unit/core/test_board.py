import pytest

from battlefleet.game.core.board import Board
from battlefleet.game.core.models import Coord


def test_board_can_place_and_reject_overlap_or_oob() -> None:
    board = Board(owner_id="p1")
    cells = [Coord(0, 0), Coord(1, 0)]
    assert board.can_place(cells)
    board.place_ship("destroyer", cells)
    assert board.ship_at(Coord(1, 0)) == "destroyer"
    assert not board.can_place([Coord(1, 0), Coord(2, 0)])
    assert not board.can_place([Coord(9, 9), Coord(10, 9)])
    with pytest.raises(ValueError):
        board.place_ship("other", [Coord(0, 0)])
    with pytest.raises(ValueError):
        board.place_ship("destroyer", [Coord(5, 5)])


def test_board_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValueError):
        Board(width=0, height=10)


def test_mark_hit_files_hits_and_misses() -> None:
    board = Board()
    board.place_ship("sub", [Coord(4, 4), Coord(4, 5)])
    board.mark_hit(Coord(4, 4))
    board.mark_hit(Coord(0, 0))
    assert board.is_hit(Coord(4, 4))
    assert board.is_hit(Coord(0, 0))
    assert not board.is_hit(Coord(4, 5))
    assert board.hits == [Coord(4, 4)]
    assert board.misses == [Coord(0, 0)]


def test_reveal_counts_down_and_reports_new_cells() -> None:
    board = Board()
    assert board.reveal(Coord(2, 3), 2)
    assert not board.reveal(Coord(2, 3), 1)
    assert board.revealed_cells() == [Coord(2, 3)]
    board.tick_reveals()
    assert board.is_revealed(Coord(2, 3))
    board.tick_reveals()
    assert not board.is_revealed(Coord(2, 3))
    board.tick_reveals()
    assert int(board.reveal_grid[3, 2]) == 0


def test_area_is_clipped_to_board_in_row_major_order() -> None:
    board = Board()
    assert board.area(Coord(0, 0), 1) == [Coord(0, 0), Coord(1, 0), Coord(0, 1), Coord(1, 1)]
    assert len(board.area(Coord(5, 5), 2)) == 25
