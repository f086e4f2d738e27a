"""Encode a partially revealed board as a CNF exact-count constraint problem."""

import itertools
import logging
from typing import AbstractSet, Dict, Iterable, List, Mapping, Tuple

from pysat.formula import CNF

from .board import MINE, CellState
from .utils import Position

logger = logging.getLogger(__name__)

Clause = List[int]


def exactly_n_clauses(variables: List[int], n: int) -> List[Clause]:
    """
    Clauses forcing exactly ``n`` of ``variables`` to be true (a mine).

    At-least-n: every subset of size len - n + 1 must contain a mine.
    At-most-n: every subset of size n + 1 must contain a safe cell.

    Raises:
        ValueError: If n is outside [0, len(variables)].
    """
    k = len(variables)
    if n < 0 or n > k:
        raise ValueError(f"Cannot place {n} mines among {k} cells.")

    clauses: List[Clause] = []
    for subset in itertools.combinations(variables, k - n + 1):
        clauses.append(list(subset))
    for subset in itertools.combinations(variables, n + 1):
        clauses.append([-v for v in subset])
    return clauses


def encode_board(board) -> Tuple[CNF, Dict[Position, int]]:
    """
    Build a fresh formula for the board's current knowledge.

    Every cell that is not uncovered (covered or flagged) gets one variable,
    allocated in row-major order starting at 1; true means "is a mine". Every
    uncovered non-mine cell contributes an exact-count constraint over its
    not-uncovered neighbors, with uncovered neighboring mines already counted.

    Args:
        board: A Board or any object exposing height, width, cell(row, col),
            cell_state(row, col) and neighbors(row, col).

    Returns:
        Tuple of (formula, var_map) where var_map maps each not-uncovered
        position to its variable.
    """
    var_map: Dict[Position, int] = {}
    for row in range(board.height):
        for col in range(board.width):
            if board.cell_state(row, col) != CellState.UNCOVERED:
                var_map[(row, col)] = len(var_map) + 1

    formula = CNF()
    for row in range(board.height):
        for col in range(board.width):
            if board.cell_state(row, col) != CellState.UNCOVERED:
                continue
            value = board.cell(row, col)
            if value == MINE:
                continue

            nbr_vars: List[int] = []
            known_mines = 0
            for pos in board.neighbors(row, col):
                var = var_map.get(pos)
                if var is not None:
                    nbr_vars.append(var)
                elif board.cell(*pos) == MINE:
                    known_mines += 1

            needed = value - known_mines
            if needed < 0 or needed > len(nbr_vars):
                # A consistent board can never get here; make the formula unsatisfiable.
                logger.warning(
                    "Contradictory constraint at %s: %d mines needed among %d cells",
                    (row, col), needed, len(nbr_vars),
                )
                formula.append([])
                continue

            formula.extend(exactly_n_clauses(nbr_vars, needed))

    logger.debug(
        "Encoded %d variables into %d clauses", len(var_map), len(formula.clauses)
    )
    return formula, var_map


def assignment_from_mines(
    var_map: Mapping[Position, int], mines: AbstractSet[Position]
) -> List[int]:
    """Literal assignment (DIMACS model style) placing mines exactly at ``mines``."""
    return [var if pos in mines else -var for pos, var in var_map.items()]


def formula_satisfied_by(formula: CNF, assignment: Iterable[int]) -> bool:
    """Check a full assignment against every clause of the formula."""
    true_literals = set(assignment)
    return all(
        any(lit in true_literals for lit in clause) for clause in formula.clauses
    )
