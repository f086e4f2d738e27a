import pytest

from mineboard import EMPTY, MINE, Board, BoardSize, CellState
from mineboard.utils import get_neighborhoods


def test_new_board_is_covered_and_counts_mines():
    board = Board(3, 4, [(0, 0), (2, 3)])
    assert board.height == 3
    assert board.width == 4
    assert board.mine_count == 2
    assert board.mine_positions == frozenset({(0, 0), (2, 3)})
    for row, col in board.positions():
        assert board.cell_state(row, col) == CellState.COVERED


def test_mine_set_and_cells_agree():
    board = Board.from_layout(["*..", ".*.", "..."])
    mines_from_cells = {
        (r, c) for r, c in board.positions() if board.cell(r, c) == MINE
    }
    assert mines_from_cells == board.mine_positions
    assert board.mine_count == len(board.mine_positions) == 2


def test_duplicate_mines_count_once():
    board = Board(2, 2, [(0, 0), (0, 0)])
    assert board.mine_count == 1


def test_calculate_numbers():
    board = Board.from_layout(["*..", "...", "..."])
    assert board.cell(0, 1) == 1
    assert board.cell(1, 1) == 1
    assert board.cell(2, 2) == EMPTY


def test_no_mines_board_is_all_empty():
    board = Board(3, 3)
    for row, col in board.positions():
        assert board.cell(row, col) == EMPTY


def test_invalid_dimensions_and_mines():
    with pytest.raises(ValueError):
        Board(0, 3)
    with pytest.raises(ValueError):
        Board(2, 2, [(2, 0)])
    with pytest.raises(ValueError):
        Board.from_layout(["*.", "..."])


def test_out_of_bounds_access_returns_none():
    board = Board(2, 2)
    assert board.cell(10, 10) is None
    assert board.cell_state(10, 10) is None
    assert board.cell(-1, 0) is None


def test_flag_and_unflag_are_idempotent():
    board = Board(3, 3)
    board.flag_cell(1, 1)
    board.flag_cell(1, 1)
    assert board.cell_state(1, 1) == CellState.FLAGGED
    board.unflag_cell(1, 1)
    board.unflag_cell(1, 1)
    assert board.cell_state(1, 1) == CellState.COVERED


def test_unflag_does_not_cover_uncovered_cell():
    board = Board(3, 3)
    board.uncover_cell(1, 1)
    board.unflag_cell(1, 1)
    board.flag_cell(1, 1)
    assert board.cell_state(1, 1) == CellState.UNCOVERED


def test_neighbors_corner_edge_center():
    board = Board(3, 3)
    assert len(board.neighbors(0, 0)) == 3
    assert len(board.neighbors(0, 1)) == 5
    assert len(board.neighbors(1, 1)) == 8
    assert (1, 1) not in board.neighbors(1, 1)


def test_neighborhoods_are_row_major_and_shared_per_shape():
    table = get_neighborhoods(2, 3)
    assert table[(0, 1)] == ((0, 0), (0, 2), (1, 0), (1, 1), (1, 2))
    assert table[(1, 2)] == ((0, 1), (0, 2), (1, 1))
    assert get_neighborhoods(2, 3) is table
    assert get_neighborhoods(3, 2) is not table
    with pytest.raises(ValueError):
        get_neighborhoods(0, 3)


def test_flood_fill_reveals_everything_but_the_mine():
    board = Board.from_layout(["*..", "...", "..."])
    revealed = board.flood_fill(2, 2)
    positions = {(r, c) for r, c, _ in revealed}
    assert positions == set(board.positions()) - {(0, 0)}
    assert board.covered_positions() == [(0, 0)]


def test_flood_fill_wave_distances():
    board = Board(1, 4)
    revealed = board.flood_fill(0, 0)
    assert revealed == [(0, 0, 0), (0, 1, 1), (0, 2, 2), (0, 3, 3)]


def test_flood_fill_skips_flagged_cells():
    board = Board(1, 3)
    board.flag_cell(0, 2)
    board.flood_fill(0, 0)
    assert board.cell_state(0, 2) == CellState.FLAGGED


def test_reveal_number_does_not_spread():
    board = Board.from_layout(["*..."])
    revealed = board.reveal(0, 1)
    assert revealed == [(0, 1, 0)]
    assert board.reveal(0, 1) == []
    with pytest.raises(ValueError):
        board.reveal(5, 5)


def test_reveal_mine_uncovers_only_it():
    board = Board.from_layout(["*.."])
    assert board.reveal(0, 0) == [(0, 0, 0)]
    assert board.covered_positions() == [(0, 1), (0, 2)]


def test_copy_is_independent():
    board = Board.from_layout(["*.", ".."])
    clone = board.copy()
    clone.uncover_cell(1, 1)
    assert board.cell_state(1, 1) == CellState.COVERED
    assert clone.mine_positions == board.mine_positions


def test_board_size_presets():
    assert BoardSize.SMALL.params() == (8, 8, 10)
    assert BoardSize.MEDIUM.params() == (16, 16, 40)
    assert BoardSize.LARGE.params() == (24, 24, 99)
    assert BoardSize.LARGE.label() == "Large"
    assert BoardSize.from_params(16, 16, 40) == BoardSize.MEDIUM
    assert BoardSize.from_params(5, 5, 3) == BoardSize.SMALL


def test_format_board_plain():
    board = Board.from_layout(["*."])
    board.uncover_cell(0, 1)
    assert board.format_board(color=False).splitlines()[-1] == " 0 | .  1"
    assert "M" in board.format_board(reveal_all=True, color=False)
