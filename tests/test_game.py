"""Unit tests for the ClassicXO board."""

import pytest

from classicxo.game import WINNING_LINES, Board, CellOccupied, Mark


def test_new_board_is_empty():
    board = Board()
    assert board.cells == (Mark.EMPTY,) * 9
    assert board.empty_cells() == list(range(9))
    assert not board.is_full()


def test_set_then_get_returns_mark():
    board = Board()
    board.set(4, Mark.X)
    assert board.get(4) is Mark.X
    assert board.get(4) is board.get(4)


def test_set_on_occupied_cell_leaves_board_unchanged():
    board = Board()
    board.set(0, Mark.X)
    before = board.cells

    with pytest.raises(CellOccupied) as excinfo:
        board.set(0, Mark.O)

    assert board.cells == before
    assert excinfo.value.index == 0
    assert excinfo.value.mark is Mark.X


def test_set_rejects_empty_mark_and_bad_index():
    board = Board()
    with pytest.raises(ValueError):
        board.set(0, Mark.EMPTY)
    with pytest.raises(IndexError):
        board.set(9, Mark.X)
    with pytest.raises(IndexError):
        board.get(-1)


def test_clear_resets_every_cell():
    board = Board.from_cells("XOXOXOXOX")
    board.clear()
    assert board.count(Mark.EMPTY) == 9


def test_row_col_addressing():
    assert Board.index(0, 0) == 0
    assert Board.index(1, 2) == 5
    assert Board.index(2, 2) == 8
    with pytest.raises(IndexError):
        Board.index(3, 0)


@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_is_detected(line):
    board = Board()
    for idx in line:
        board.set(idx, Mark.O)
    assert board.winning_line(Mark.O) == line
    assert board.winning_line(Mark.X) is None


def test_first_line_in_scan_order_is_reported():
    # Row 0 and column 0 both complete.
    board = Board.from_cells("XXXX  X  ")
    assert board.winning_line(Mark.X) == (0, 1, 2)


def test_full_board_without_triple_has_no_winner():
    board = Board.from_cells("XOXXOOOXX")
    assert board.is_full()
    assert board.winning_line(Mark.X) is None
    assert board.winning_line(Mark.O) is None
    assert board.winning_line(Mark.EMPTY) is None


def test_hypothetical_placement_is_undone_on_error():
    board = Board()
    with pytest.raises(RuntimeError):
        with board.hypothetical(3, Mark.X):
            assert board.get(3) is Mark.X
            raise RuntimeError("boom")
    assert board.get(3) is Mark.EMPTY


def test_from_cells_validates_input():
    with pytest.raises(ValueError):
        Board.from_cells("XO")
    with pytest.raises(ValueError):
        Board.from_cells("xo       ")
