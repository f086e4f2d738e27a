"""
Minesweeper board generator and difficulty analyzer

Generates boards biased toward a requested difficulty and classifies them by the
minimum number of guesses needed to solve them:
- Weighted placement: first-click-safe mine sampling biased by distance from the center
- Constraint encoding: exact-count CNF clauses for every revealed number
- SAT oracle: forced-mine / forced-safe / ambiguous status per covered cell
- Minimum-guess search: budgeted breadth-first branch-and-bound over guesses
"""

from .board import MINE, EMPTY, Board, BoardSize, CellState
from .difficulty import (
    Difficulty,
    DifficultyThresholds,
    classify_guesses,
    expected_attempts,
    recommended_max_attempts,
)
from .generator import generate_board
from .encoder import encode_board
from .oracle import ConstraintOracle
from .search import (
    IMPOSSIBLE,
    BoardView,
    CellStatus,
    InconsistentBoardError,
    MinimumGuessSearch,
    SearchBudgetExceeded,
    analyze_cells,
    hint_map,
    minimum_guesses,
)
from .controller import (
    Classification,
    GenerationResult,
    classify_board,
    generate_board_with_difficulty,
    iter_generation_attempts,
)
from .analysis import (
    format_cell_analysis,
    run_generator_single_test,
    run_generator_many_tests,
    run_bias_level_analysis,
    summarize_expected_attempts,
)

__version__ = "1.0.0"

__all__ = [
    # Board model
    "MINE",
    "EMPTY",
    "Board",
    "BoardSize",
    "CellState",
    # Difficulty policy
    "Difficulty",
    "DifficultyThresholds",
    "classify_guesses",
    "expected_attempts",
    "recommended_max_attempts",
    # Generation and analysis pipeline
    "generate_board",
    "encode_board",
    "ConstraintOracle",
    "IMPOSSIBLE",
    "BoardView",
    "CellStatus",
    "InconsistentBoardError",
    "MinimumGuessSearch",
    "SearchBudgetExceeded",
    "analyze_cells",
    "hint_map",
    "minimum_guesses",
    # Retry controller
    "Classification",
    "GenerationResult",
    "classify_board",
    "generate_board_with_difficulty",
    "iter_generation_attempts",
    # Analysis functions
    "format_cell_analysis",
    "run_generator_single_test",
    "run_generator_many_tests",
    "run_bias_level_analysis",
    "summarize_expected_attempts",
]
