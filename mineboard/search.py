"""
Forced/ambiguous cell analysis and the minimum-guess search.

A covered cell is forced when exactly one of "mine" and "safe" is consistent with
the revealed numbers, and ambiguous when both are. The minimum-guess search
explores hypothetical guesses on ambiguous cells to find the fewest guesses
after which pure deduction solves the board.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import (
    Callable,
    Deque,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)

from .board import EMPTY, MINE, Board, CellState
from .encoder import encode_board
from .oracle import ConstraintOracle
from .utils import Position

logger = logging.getLogger(__name__)

# Returned when no sequence of guesses leads to a consistent solved board.
IMPOSSIBLE: float = float("inf")


class InconsistentBoardError(RuntimeError):
    """The revealed numbers admit no mine layout at all."""


class SearchBudgetExceeded(RuntimeError):
    """The node or time budget of a minimum-guess search ran out."""


class CellStatus(Enum):
    FORCED_MINE = "forced_mine"
    FORCED_SAFE = "forced_safe"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class CellAnalysis:
    position: Position
    mine_sat: bool
    safe_sat: bool

    @property
    def status(self) -> CellStatus:
        if self.mine_sat and self.safe_sat:
            return CellStatus.AMBIGUOUS
        if self.mine_sat:
            return CellStatus.FORCED_MINE
        return CellStatus.FORCED_SAFE


def analyze_cells(
    board,
    oracle: Optional[ConstraintOracle] = None,
    check: Optional[Callable[[], None]] = None,
) -> Dict[Position, CellAnalysis]:
    """
    Test every not-uncovered cell for forced mine, forced safe or ambiguous status.

    Args:
        board: A Board or BoardView.
        oracle: SAT oracle to use; a fresh one when omitted.
        check: Called before each cell is tested; raising from it aborts the pass.

    Returns:
        Mapping from position to its analysis, in row-major order.

    Raises:
        InconsistentBoardError: If the revealed numbers are contradictory.
    """
    oracle = oracle or ConstraintOracle()
    formula, var_map = encode_board(board)

    if not oracle.solve(formula).satisfiable:
        raise InconsistentBoardError("The board's constraints are unsatisfiable.")

    analyses: Dict[Position, CellAnalysis] = {}
    for pos, var in var_map.items():
        if check is not None:
            check()
        mine_sat = oracle.solve_with_unit(formula, var).satisfiable
        safe_sat = oracle.solve_with_unit(formula, -var).satisfiable
        analyses[pos] = CellAnalysis(pos, mine_sat, safe_sat)
    return analyses


def hint_map(
    board, oracle: Optional[ConstraintOracle] = None
) -> Dict[Position, CellStatus]:
    """Per-position ForcedMine / ForcedSafe / Ambiguous status for hint features."""
    return {pos: a.status for pos, a in analyze_cells(board, oracle).items()}


class BoardView:
    """
    Immutable hypothetical view of a board: the base board plus revealed overrides.

    An override uncovers a position with the given content; MINE marks a known
    mine. The base board stays untouched and is the source of truth for reveals.
    """

    __slots__ = ("base", "height", "width", "_overrides")

    def __init__(
        self, base: Board, overrides: Optional[Mapping[Position, int]] = None
    ) -> None:
        self.base = base
        self.height = base.height
        self.width = base.width
        self._overrides: Dict[Position, int] = dict(overrides or {})

    def cell(self, row: int, col: int) -> Optional[int]:
        return self._overrides.get((row, col), self.base.cell(row, col))

    def cell_state(self, row: int, col: int) -> Optional[CellState]:
        if (row, col) in self._overrides:
            return CellState.UNCOVERED
        return self.base.cell_state(row, col)

    def neighbors(self, row: int, col: int) -> Tuple[Position, ...]:
        return self.base.neighbors(row, col)

    def true_cell(self, row: int, col: int) -> Optional[int]:
        """Actual content of the cell on the underlying board."""
        return self.base.cell(row, col)

    @property
    def fingerprint(self) -> FrozenSet[Tuple[Position, int]]:
        return frozenset(self._overrides.items())

    def with_reveals(self, reveals: Mapping[Position, int]) -> "BoardView":
        merged = dict(self._overrides)
        merged.update(reveals)
        return BoardView(self.base, merged)

    def safe_reveals(self, row: int, col: int) -> Dict[Position, int]:
        """
        Cells uncovered by revealing (row, col) as safe, with flood fill over empties.

        Only covered cells are expanded, matching Board.flood_fill.
        """
        reveals: Dict[Position, int] = {}
        frontier: Deque[Position] = deque([(row, col)])
        while frontier:
            pos = frontier.popleft()
            if pos in reveals:
                continue
            value = self.true_cell(*pos)
            reveals[pos] = value
            if value != EMPTY:
                continue
            for nbr in self.neighbors(*pos):
                if nbr not in reveals and self.cell_state(*nbr) == CellState.COVERED:
                    frontier.append(nbr)
        return reveals


@dataclass
class _Node:
    view: BoardView
    depth: int
    ambiguous: List[Position]


class MinimumGuessSearch:
    """
    Breadth-first branch-and-bound over guesses on ambiguous cells.

    cost(view) is 0 when deduction alone leaves no ambiguous cell; otherwise it is
    the minimum over ambiguous cells c of 1 + min(cost(c is a mine), cost(c is safe)).
    Because every level adds exactly one guess, the first solved node reached in
    breadth-first order has the minimum cost. Nodes live in an arena list and the
    frontier is an index into it.

    Every node is settled before it is tested: forced-safe cells are revealed with
    their true contents and forced-mine cells are marked, until a fixpoint. A node
    whose constraints become unsatisfiable, or that reveals a real mine as safe, is
    an inconsistent branch and is dropped.
    """

    def __init__(
        self,
        board: Board,
        oracle: Optional[ConstraintOracle] = None,
        max_nodes: Optional[int] = None,
        time_limit: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            board: The board to analyze, in its current revealed state. Its mine
                layout is used as ground truth for safe reveals.
            oracle: SAT oracle to use; a fresh one when omitted.
            max_nodes: Maximum number of settled nodes, None for unbounded.
            time_limit: Wall-clock budget in seconds, None for unbounded.
            clock: Monotonic clock used for the time budget.
        """
        if max_nodes is not None and max_nodes < 1:
            raise ValueError("max_nodes must be at least 1.")
        if time_limit is not None and time_limit <= 0:
            raise ValueError("time_limit must be positive.")

        self.board = board
        self.oracle = oracle or ConstraintOracle()
        self.max_nodes = max_nodes
        self.time_limit = time_limit
        self._clock = clock
        self._started: float = 0.0

        self.nodes: int = 0
        self.cache_hits: int = 0

    def _check_deadline(self) -> None:
        if (
            self.time_limit is not None
            and self._clock() - self._started > self.time_limit
        ):
            raise SearchBudgetExceeded(
                f"Search exceeded its time limit of {self.time_limit}s."
            )

    def _check_budget(self) -> None:
        if self.max_nodes is not None and self.nodes >= self.max_nodes:
            raise SearchBudgetExceeded(
                f"Search exceeded its budget of {self.max_nodes} nodes."
            )
        self._check_deadline()

    def _settle(self, view: BoardView) -> Optional[Tuple[BoardView, List[Position]]]:
        """
        Apply pure deduction to a fixpoint.

        Returns:
            (settled_view, ambiguous_positions), or None for an inconsistent branch.
        """
        self._check_budget()
        self.nodes += 1

        while True:
            try:
                analyses = analyze_cells(view, self.oracle, self._check_deadline)
            except InconsistentBoardError:
                return None

            mines: Dict[Position, int] = {}
            safes: Dict[Position, int] = {}
            ambiguous: List[Position] = []
            for pos, analysis in analyses.items():
                status = analysis.status
                if status == CellStatus.AMBIGUOUS:
                    ambiguous.append(pos)
                elif status == CellStatus.FORCED_MINE:
                    mines[pos] = MINE
                elif view.true_cell(*pos) == MINE:
                    return None
                elif pos not in safes:
                    safes.update(view.safe_reveals(*pos))

            if not mines and not safes:
                return view, ambiguous
            if not mines.keys().isdisjoint(safes):
                return None

            view = view.with_reveals({**safes, **mines})
            self._check_deadline()

    def _children(self, view: BoardView, pos: Position) -> List[BoardView]:
        """Hypothetical views after guessing ``pos`` a mine, then safe."""
        children = [view.with_reveals({pos: MINE})]
        if view.true_cell(*pos) != MINE:
            children.append(view.with_reveals(view.safe_reveals(*pos)))
        return children

    def run(self) -> Union[int, float]:
        """
        Compute the minimum number of guesses needed to solve the board.

        Returns:
            The guess count, or IMPOSSIBLE when the board's constraints are
            inconsistent or no branch reaches a consistent solved state.

        Raises:
            SearchBudgetExceeded: If the node or time budget runs out.
        """
        self._started = self._clock()
        self.nodes = 0
        self.cache_hits = 0

        root_view = BoardView(self.board)
        settled = self._settle(root_view)
        if settled is None:
            logger.debug("Root board is inconsistent")
            return IMPOSSIBLE

        view, ambiguous = settled
        if not ambiguous:
            return 0

        seen: Set[FrozenSet[Tuple[Position, int]]] = {
            root_view.fingerprint,
            view.fingerprint,
        }
        arena: List[_Node] = [_Node(view, 0, ambiguous)]
        i = 0
        while i < len(arena):
            node = arena[i]
            i += 1

            for pos in node.ambiguous:
                for child in self._children(node.view, pos):
                    if child.fingerprint in seen:
                        self.cache_hits += 1
                        continue
                    seen.add(child.fingerprint)

                    settled = self._settle(child)
                    if settled is None:
                        continue
                    child_view, child_ambiguous = settled
                    if not child_ambiguous:
                        logger.debug(
                            "Solved after %d guesses (%d nodes, %d cache hits)",
                            node.depth + 1, self.nodes, self.cache_hits,
                        )
                        return node.depth + 1

                    fingerprint = child_view.fingerprint
                    if fingerprint != child.fingerprint:
                        if fingerprint in seen:
                            self.cache_hits += 1
                            continue
                        seen.add(fingerprint)
                    arena.append(_Node(child_view, node.depth + 1, child_ambiguous))

        return IMPOSSIBLE


def minimum_guesses(
    board: Board,
    oracle: Optional[ConstraintOracle] = None,
    max_nodes: Optional[int] = None,
    time_limit: Optional[float] = None,
) -> Union[int, float]:
    """Convenience wrapper around MinimumGuessSearch(...).run()."""
    return MinimumGuessSearch(
        board, oracle=oracle, max_nodes=max_nodes, time_limit=time_limit
    ).run()
