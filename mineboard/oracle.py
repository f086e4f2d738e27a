"""SAT oracle: a thin wrapper around a python-sat solver."""

from typing import List, NamedTuple, Optional

from pysat.formula import CNF
from pysat.solvers import Solver

DEFAULT_SOLVER = "glucose3"


class SatResult(NamedTuple):
    satisfiable: bool
    model: Optional[List[int]]


UNSATISFIABLE = SatResult(False, None)


class ConstraintOracle:
    """
    Decide satisfiability of CNF formulas.

    Each query runs on a fresh solver instance; forcing queries append their
    unit clause to a copy of the formula so the caller's formula is never mutated.
    """

    def __init__(self, solver_name: str = DEFAULT_SOLVER) -> None:
        self.solver_name = solver_name
        self.calls: int = 0

    def solve(self, formula: CNF) -> SatResult:
        """Return SatResult(True, model) or UNSATISFIABLE."""
        self.calls += 1
        if any(not clause for clause in formula.clauses):
            return UNSATISFIABLE

        with Solver(name=self.solver_name, bootstrap_with=formula.clauses) as solver:
            if solver.solve():
                return SatResult(True, solver.get_model() or [])
        return UNSATISFIABLE

    def solve_with_unit(self, formula: CNF, literal: int) -> SatResult:
        """Solve ``formula`` with ``literal`` forced true (positive: mine, negative: safe)."""
        forced = formula.copy()
        forced.append([literal])
        return self.solve(forced)
