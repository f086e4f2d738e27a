import itertools

import numpy as np
import pytest

from mineboard import Board, Difficulty, encode_board, generate_board
from mineboard.encoder import (
    assignment_from_mines,
    exactly_n_clauses,
    formula_satisfied_by,
)


def _satisfies(clauses, variables, assignment_bits):
    model = [v if bit else -v for v, bit in zip(variables, assignment_bits)]
    true_lits = set(model)
    return all(any(lit in true_lits for lit in clause) for clause in clauses)


@pytest.mark.parametrize("k,n", [(1, 0), (1, 1), (3, 1), (4, 2), (5, 0), (5, 5)])
def test_exactly_n_clauses_accept_exactly_n(k, n):
    variables = list(range(1, k + 1))
    clauses = exactly_n_clauses(variables, n)
    for bits in itertools.product([False, True], repeat=k):
        assert _satisfies(clauses, variables, bits) == (sum(bits) == n)


def test_exactly_n_clause_count():
    # C(|N|, |N| - n + 1) + C(|N|, n + 1)
    assert len(exactly_n_clauses(list(range(1, 9)), 3)) == 28 + 70


def test_exactly_n_clauses_rejects_impossible_count():
    with pytest.raises(ValueError):
        exactly_n_clauses([1, 2], 3)


def test_variables_only_for_cells_not_uncovered():
    board = Board.from_layout(["*..", "...", "..."])
    board.uncover_cell(1, 1)
    board.flag_cell(0, 0)
    _, var_map = encode_board(board)
    assert (1, 1) not in var_map
    assert (0, 0) in var_map
    assert sorted(var_map.values()) == list(range(1, 9))
    assert len(set(var_map.values())) == len(var_map)


def test_single_number_encoding():
    board = Board.from_layout(["*."])
    board.uncover_cell(0, 1)
    formula, var_map = encode_board(board)
    assert var_map == {(0, 0): 1}
    assert sorted(formula.clauses) == [[1]]


def test_empty_cell_forces_neighbors_safe():
    board = Board.from_layout(["..."])
    board.uncover_cell(0, 1)
    formula, var_map = encode_board(board)
    assert sorted(formula.clauses) == sorted([[-var_map[(0, 0)]], [-var_map[(0, 2)]]])


def test_uncovered_mines_count_as_known():
    board = Board.from_layout(["*.*"])
    board.uncover_cell(0, 0)
    board.uncover_cell(0, 1)
    formula, var_map = encode_board(board)
    assert var_map == {(0, 2): 1}
    assert sorted(formula.clauses) == [[1]]


def test_contradiction_yields_empty_clause():
    board = Board.from_layout(["*."])
    board.uncover_cell(0, 1)
    board.cells[0][1] = 3
    formula, _ = encode_board(board)
    assert [] in formula.clauses


def test_true_layout_satisfies_generated_formula():
    rng = np.random.default_rng(99)
    for bias in Difficulty:
        for _ in range(10):
            board = generate_board(8, 8, 10, (4, 4), bias, rng)
            board.reveal(4, 4)
            formula, var_map = encode_board(board)
            assignment = assignment_from_mines(var_map, board.mine_positions)
            assert formula_satisfied_by(formula, assignment)


def test_wrong_layout_violates_formula():
    board = Board.from_layout(["*.", ".."])
    board.uncover_cell(1, 0)
    board.uncover_cell(1, 1)
    formula, var_map = encode_board(board)
    assert not formula_satisfied_by(formula, assignment_from_mines(var_map, set()))
    both = {(0, 0), (0, 1)}
    assert not formula_satisfied_by(formula, assignment_from_mines(var_map, both))
