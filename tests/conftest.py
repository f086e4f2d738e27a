import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from mineboard import Board, CellState  # noqa: E402


def open_rows(board, rows):
    """Uncover every cell of the given rows without flood fill."""
    for row in rows:
        for col in range(board.width):
            board.uncover_cell(row, col)
    return board


@pytest.fixture
def fifty_fifty_board():
    """Two covered cells on the top row, one mine between them, numbers below."""
    board = Board.from_layout(["*.", ".."])
    return open_rows(board, [1])


@pytest.fixture
def two_pair_board():
    board = Board.from_layout(["*.", "..", "..", "*."])
    return open_rows(board, [1, 2])


@pytest.fixture
def three_pair_board():
    board = Board.from_layout(["*.", "..", "..", "*.", "..", "..", "*."])
    return open_rows(board, [1, 2, 4, 5])


@pytest.fixture
def solved_board():
    board = Board.from_layout(["*..", "...", "..*"])
    for row, col in board.positions():
        board.uncover_cell(row, col)
    assert not board.covered_positions()
    assert board.cell_state(0, 0) == CellState.UNCOVERED
    return board
