"""Board classification and the generate -> classify -> retry controller."""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from .board import Board
from .difficulty import (
    DEFAULT_THRESHOLDS,
    Difficulty,
    DifficultyThresholds,
    classify_guesses,
)
from .generator import RandomLike, as_generator, generate_board
from .oracle import ConstraintOracle
from .search import (
    IMPOSSIBLE,
    InconsistentBoardError,
    MinimumGuessSearch,
    SearchBudgetExceeded,
)
from .utils import Position

logger = logging.getLogger(__name__)

# Generous against recommended_max_attempts() for the weakest biased tier (p ~ 0.3).
DEFAULT_MAX_ATTEMPTS = 50
DEFAULT_MAX_NODES = 2000


@dataclass(frozen=True)
class Classification:
    """
    Outcome of classifying one board.

    ``guesses`` and ``difficulty`` are None when the search budget ran out; a
    timed-out board is "unknown", which is distinct from HARD.
    """

    guesses: Optional[Union[int, float]]
    difficulty: Optional[Difficulty]
    timed_out: bool = False
    nodes: int = 0

    @property
    def known(self) -> bool:
        return self.difficulty is not None

    @property
    def impossible(self) -> bool:
        return self.guesses == IMPOSSIBLE


def classify_board(
    board: Board,
    *,
    thresholds: DifficultyThresholds = DEFAULT_THRESHOLDS,
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
    time_limit: Optional[float] = None,
    oracle: Optional[ConstraintOracle] = None,
) -> Classification:
    """
    Classify a board in its current revealed state by its minimum guess count.

    Returns:
        A Classification. Budget exhaustion is reported with timed_out=True
        rather than raised.
    """
    search = MinimumGuessSearch(
        board, oracle=oracle, max_nodes=max_nodes, time_limit=time_limit
    )
    try:
        guesses = search.run()
    except SearchBudgetExceeded as exc:
        logger.warning("Classification unknown: %s", exc)
        return Classification(None, None, timed_out=True, nodes=search.nodes)

    return Classification(
        guesses, classify_guesses(guesses, thresholds), nodes=search.nodes
    )


@dataclass(frozen=True)
class GenerationAttempt:
    attempt: int
    board: Board
    classification: Classification
    matched: bool


@dataclass(frozen=True)
class GenerationResult:
    board: Board
    classification: Classification
    attempts: int
    matched: bool


def iter_generation_attempts(
    height: int,
    width: int,
    mine_count: int,
    first_click: Position,
    target: Difficulty,
    *,
    bias: Optional[Difficulty] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
    time_limit: Optional[float] = None,
    thresholds: DifficultyThresholds = DEFAULT_THRESHOLDS,
    rng: RandomLike = None,
    oracle: Optional[ConstraintOracle] = None,
) -> Iterator[GenerationAttempt]:
    """
    Yield one self-contained generate-and-classify attempt at a time.

    Iteration stops after the first matching attempt or after ``max_attempts``.
    The consumer may stop early between attempts; nothing needs cleaning up.

    Yields:
        GenerationAttempt whose board is fully covered; the classification was
        computed on a copy with ``first_click`` revealed.

    Raises:
        ValueError: If max_attempts < 1 or the generation parameters are invalid.
        InconsistentBoardError: If a freshly generated board has contradictory
            constraints, which indicates a placement or encoding defect.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")

    bias = target if bias is None else bias
    gen = as_generator(rng)
    oracle = oracle or ConstraintOracle()

    for attempt in range(1, max_attempts + 1):
        board = generate_board(height, width, mine_count, first_click, bias, gen)

        opened = board.copy()
        opened.reveal(*first_click)
        classification = classify_board(
            opened,
            thresholds=thresholds,
            max_nodes=max_nodes,
            time_limit=time_limit,
            oracle=oracle,
        )
        if classification.impossible:
            raise InconsistentBoardError(
                "A freshly generated board has unsatisfiable constraints."
            )

        matched = classification.difficulty == target
        logger.debug(
            "Attempt %d: guesses=%s difficulty=%s target=%s",
            attempt,
            classification.guesses,
            classification.difficulty.value if classification.known else "unknown",
            target.value,
        )
        yield GenerationAttempt(attempt, board, classification, matched)
        if matched:
            return


def _distance_to_target(classification: Classification, target: Difficulty) -> int:
    if classification.difficulty is None:
        return len(Difficulty)
    return abs(classification.difficulty.rank - target.rank)


def generate_board_with_difficulty(
    height: int,
    width: int,
    mine_count: int,
    first_click: Position,
    target: Difficulty,
    *,
    bias: Optional[Difficulty] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
    time_limit: Optional[float] = None,
    thresholds: DifficultyThresholds = DEFAULT_THRESHOLDS,
    rng: RandomLike = None,
    oracle: Optional[ConstraintOracle] = None,
) -> GenerationResult:
    """
    Generate boards until one classifies as ``target`` or the attempts run out.

    Args:
        height: Board height (rows).
        width: Board width (columns).
        mine_count: Number of mines.
        first_click: Position kept mine-free together with its neighbors.
        target: Requested difficulty.
        bias: Placement bias; defaults to ``target``.
        max_attempts: Maximum number of boards to generate.
        max_nodes: Per-board search node budget (None for unbounded).
        time_limit: Per-board search time budget in seconds.
        thresholds: Guess-count thresholds for classification.
        rng: numpy Generator, integer seed or None.
        oracle: SAT oracle shared across attempts.

    Returns:
        GenerationResult. When no attempt matched, ``matched`` is False and the
        board is the attempt whose known difficulty was closest to the target
        (ties go to the most recent attempt).
    """
    attempts: List[GenerationAttempt] = list(
        iter_generation_attempts(
            height,
            width,
            mine_count,
            first_click,
            target,
            bias=bias,
            max_attempts=max_attempts,
            max_nodes=max_nodes,
            time_limit=time_limit,
            thresholds=thresholds,
            rng=rng,
            oracle=oracle,
        )
    )

    last = attempts[-1]
    if last.matched:
        return GenerationResult(last.board, last.classification, last.attempt, True)

    best = min(
        reversed(attempts),
        key=lambda a: _distance_to_target(a.classification, target),
    )
    logger.warning(
        "No %s board within %d attempts; returning a %s board",
        target.value,
        len(attempts),
        best.classification.difficulty.value if best.classification.known else "unknown",
    )
    return GenerationResult(best.board, best.classification, len(attempts), False)
