"""Analysis and benchmarking tools for the generator and the difficulty classifier."""

import math
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .board import MINE, Board, CellState
from .controller import DEFAULT_MAX_NODES, classify_board
from .difficulty import Difficulty, expected_attempts
from .generator import RandomLike, as_generator, generate_board
from .oracle import ConstraintOracle
from .search import CellStatus
from .utils import Position

_STATUS_CHARS: Dict[CellStatus, str] = {
    CellStatus.FORCED_MINE: "M",
    CellStatus.FORCED_SAFE: "S",
    CellStatus.AMBIGUOUS: "?",
}


def format_cell_analysis(
    board: Board,
    statuses: Mapping[Position, CellStatus],
    *,
    show_coords: bool = True,
) -> str:
    """
    Format a hint map over the board as a human-readable string.

    Args:
        board: Board whose uncovered cells are shown as their numbers.
        statuses: Hint map from search.hint_map(); covered cells found in it are
            shown as 'M' (forced mine), 'S' (forced safe) or '?' (ambiguous).
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid. Flagged cells missing from the map show 'F', other covered
        cells '.', uncovered mines 'X'.
    """
    w, h = board.width, board.height

    def cell_char(row: int, col: int) -> str:
        status = statuses.get((row, col))
        if status is not None:
            return _STATUS_CHARS[status]
        state = board.cell_state(row, col)
        if state == CellState.FLAGGED:
            return "F"
        if state == CellState.COVERED:
            return "."
        v = board.cell(row, col)
        return "X" if v == MINE else str(v)

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{col:2d}" for col in range(w))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * w - 1))

    for row in range(h):
        line = " ".join(f" {cell_char(row, col)}" for col in range(w))
        lines.append(f"{row:2d} |" + line if show_coords else line)

    return "\n".join(lines)


def run_generator_single_test(
    height: int,
    width: int,
    mine_count: int,
    bias: Difficulty,
    *,
    first_click: Optional[Position] = None,
    show_board: bool = False,
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
    time_limit: Optional[float] = None,
    rng: RandomLike = None,
) -> Dict[str, object]:
    """
    Generate one board with the given bias and classify it after the first click.

    Args:
        height: Board height.
        width: Board width.
        mine_count: Total number of mines on the board.
        bias: Placement bias.
        first_click: First revealed cell; the board center when omitted.
        show_board: If True, print the underlying board and the opened board.
        max_nodes: Search node budget.
        time_limit: Search time budget in seconds.
        rng: numpy Generator, integer seed or None.

    Returns:
        Payload with "guesses", "difficulty" (None when unknown), "timed_out",
        "nodes" and "oracle_calls".
    """
    if first_click is None:
        first_click = (height // 2, width // 2)

    board = generate_board(height, width, mine_count, first_click, bias, rng)
    board.reveal(*first_click)

    oracle = ConstraintOracle()
    classification = classify_board(
        board, max_nodes=max_nodes, time_limit=time_limit, oracle=oracle
    )

    if show_board:
        print(f"Placement bias: {bias.value}")
        print("Underlying board (mines visible):")
        print(board.format_board(reveal_all=True))
        print()
        print("Board after the first click:")
        print(board.format_board(reveal_all=False))
        print()
        label = classification.difficulty.label if classification.known else "Unknown"
        print(f"Classified as {label} ({classification.guesses} guesses).")

    return {
        "guesses": classification.guesses,
        "difficulty": classification.difficulty,
        "timed_out": classification.timed_out,
        "nodes": classification.nodes,
        "oracle_calls": oracle.calls,
    }


def run_generator_many_tests(
    height: int,
    width: int,
    mine_count: int,
    runs: int,
    bias: Difficulty,
    *,
    first_click: Optional[Position] = None,
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
    time_limit: Optional[float] = None,
    rng: RandomLike = None,
) -> Dict[str, float]:
    """
    Generate and classify many boards with one bias and return class proportions.

    Returns:
        - easy_rate, medium_rate, hard_rate: share of boards per class
        - unknown_rate: share of boards whose search ran out of budget
        - avg_guesses: mean guess count over solvable classified boards
        - avg_nodes: mean number of search nodes
        - avg_oracle_calls: mean number of SAT calls
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    gen = as_generator(rng)
    counts: Dict[Optional[Difficulty], int] = defaultdict(int)
    sums: Dict[str, float] = defaultdict(float)
    finite_guesses: List[float] = []

    for _ in range(runs):
        payload = run_generator_single_test(
            height,
            width,
            mine_count,
            bias,
            first_click=first_click,
            max_nodes=max_nodes,
            time_limit=time_limit,
            rng=gen,
        )
        counts[payload["difficulty"]] += 1  # type: ignore[index]
        sums["nodes"] += float(payload["nodes"])  # type: ignore[arg-type]
        sums["oracle_calls"] += float(payload["oracle_calls"])  # type: ignore[arg-type]

        guesses = payload["guesses"]
        if isinstance(guesses, (int, float)) and math.isfinite(guesses):
            finite_guesses.append(float(guesses))

    return {
        "easy_rate": counts[Difficulty.EASY] / runs,
        "medium_rate": counts[Difficulty.MEDIUM] / runs,
        "hard_rate": counts[Difficulty.HARD] / runs,
        "unknown_rate": counts[None] / runs,
        "avg_guesses": float(np.mean(finite_guesses)) if finite_guesses else 0.0,
        "avg_nodes": sums["nodes"] / runs,
        "avg_oracle_calls": sums["oracle_calls"] / runs,
    }


def summarize_expected_attempts(
    results: Mapping[Difficulty, Mapping[str, float]],
) -> Dict[Tuple[Difficulty, Difficulty], float]:
    """
    Expected attempts (1/p) to hit each target difficulty under each bias.

    Args:
        results: Mapping bias -> metrics from run_generator_many_tests().

    Returns:
        Mapping (bias, target) -> expected attempts; infinite when the target was
        never observed under that bias.
    """
    out: Dict[Tuple[Difficulty, Difficulty], float] = {}
    for bias, metrics in results.items():
        for target in Difficulty:
            p = float(metrics[f"{target.value}_rate"])
            out[(bias, target)] = expected_attempts(p) if p > 0 else math.inf
    return out


def run_bias_level_analysis(
    runs: int,
    *,
    height: int = 8,
    width: int = 8,
    mine_count: int = 10,
    biases: Sequence[Difficulty] = tuple(Difficulty),
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
    time_limit: Optional[float] = None,
    rng: RandomLike = None,
    plot: bool = True,
) -> Dict[Difficulty, Dict[str, float]]:
    """
    Run run_generator_many_tests() for each bias and plot the class proportions.

    Args:
        runs: Number of boards per bias.
        height, width, mine_count: Board parameters (default: the small preset).
        biases: Biases to compare.
        max_nodes: Search node budget per board.
        time_limit: Search time budget per board in seconds.
        rng: numpy Generator, integer seed or None.
        plot: If True, show bar charts of class proportions and expected attempts.

    Returns:
        Mapping from bias to the metrics returned by run_generator_many_tests().
    """
    gen = as_generator(rng)
    results: Dict[Difficulty, Dict[str, float]] = {}
    for bias in biases:
        results[bias] = run_generator_many_tests(
            height,
            width,
            mine_count,
            runs,
            bias,
            max_nodes=max_nodes,
            time_limit=time_limit,
            rng=gen,
        )

    if not plot:
        return results

    bias_names = [b.value for b in biases]
    x = np.arange(len(bias_names))
    bar_w = 0.2

    # 1) Class proportions by bias
    plt.figure()  # type: ignore[misc]
    for offset, key in zip(
        (-1.5, -0.5, 0.5, 1.5), ("easy_rate", "medium_rate", "hard_rate", "unknown_rate")
    ):
        values = [results[b][key] for b in biases]
        plt.bar(x + offset * bar_w, values, width=bar_w, label=key[:-5])  # type: ignore[misc]
    plt.xticks(x, bias_names)  # type: ignore[misc]
    plt.ylabel("Share of boards")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Classified difficulty by placement bias")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Expected attempts to hit the bias's own target
    attempts = summarize_expected_attempts(results)
    own_target = [
        attempts[(b, b)] if math.isfinite(attempts[(b, b)]) else 0.0 for b in biases
    ]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, own_target)  # type: ignore[misc]
    plt.xticks(x, bias_names)  # type: ignore[misc]
    plt.ylabel("Expected attempts (1/p)")  # type: ignore[misc]
    plt.title("Expected attempts to match the biased difficulty")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
