"""Weighted mine placement with first-click safety and a difficulty bias."""

import logging
from typing import List, Sequence, TypeVar, Union

import numpy as np

from .board import Board
from .difficulty import Difficulty
from .utils import Position, chebyshev_distance

logger = logging.getLogger(__name__)

T = TypeVar("T")

RandomLike = Union[None, int, np.random.Generator]


def as_generator(rng: RandomLike) -> np.random.Generator:
    """Accept a numpy Generator, an integer seed or None (fresh entropy)."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def center_distance(height: int, width: int, position: Position) -> int:
    """
    Manhattan distance from the geometric center ((height - 1) / 2, (width - 1) / 2), floored.

    Computed in half-cells, so both corners of an even side are equally far.
    """
    row, col = position
    return (abs(2 * row - (height - 1)) + abs(2 * col - (width - 1))) // 2


def placement_weight(
    height: int, width: int, position: Position, bias: Difficulty
) -> int:
    """
    Integer sampling weight of a candidate mine position under a bias.

    EASY pushes mines toward the edges, HARD toward the center and MEDIUM is uniform.
    """
    d = center_distance(height, width, position)
    if bias == Difficulty.EASY:
        return 1 + d
    if bias == Difficulty.HARD:
        return 1 + max(0, (height + width) // 2 - d)
    return 1


def eligible_positions(height: int, width: int, avoid: Position) -> List[Position]:
    """Row-major positions outside the 3x3 block centered on ``avoid``."""
    return [
        (row, col)
        for row in range(height)
        for col in range(width)
        if chebyshev_distance((row, col), avoid) > 1
    ]


def placement_weights(
    height: int, width: int, positions: Sequence[Position], bias: Difficulty
) -> np.ndarray:
    return np.array(
        [placement_weight(height, width, pos, bias) for pos in positions],
        dtype=float,
    )


def sample_distinct(
    population: Sequence[T],
    weights: Union[Sequence[float], np.ndarray],
    k: int,
    rng: RandomLike = None,
) -> List[T]:
    """
    Sample ``k`` distinct items without replacement, proportionally to ``weights``.

    Each draw removes the chosen item and renormalizes the remaining weights, so
    there is no rejection loop on duplicates.

    Raises:
        ValueError: If k is out of range or weights are invalid.
    """
    w = np.asarray(weights, dtype=float)
    if w.shape != (len(population),):
        raise ValueError("weights must have one entry per population item.")
    if k < 0 or k > len(population):
        raise ValueError("k must be between 0 and the population size.")
    if np.any(w < 0):
        raise ValueError("weights must be non-negative.")
    if k == 0:
        return []
    if np.count_nonzero(w) < k:
        raise ValueError("Not enough items with positive weight to sample from.")

    gen = as_generator(rng)
    idx = gen.choice(len(population), size=k, replace=False, p=w / w.sum())
    return [population[i] for i in idx]


def generate_board(
    height: int,
    width: int,
    mine_count: int,
    avoid: Position,
    bias: Difficulty = Difficulty.MEDIUM,
    rng: RandomLike = None,
) -> Board:
    """
    Place mines on a fresh board, keeping ``avoid`` and its neighbors mine-free.

    Args:
        height: Board height (rows).
        width: Board width (columns).
        mine_count: Exact number of mines to place.
        avoid: First-click position (row, col).
        bias: Difficulty whose weighting scheme is applied to candidate positions.
        rng: numpy Generator, integer seed or None.

    Returns:
        A fully covered Board with exactly ``mine_count`` mines.

    Raises:
        ValueError: If dimensions, the avoided cell or the mine count are invalid.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be positive.")
    if mine_count < 0:
        raise ValueError("mine_count must be non-negative.")
    if not (0 <= avoid[0] < height and 0 <= avoid[1] < width):
        raise ValueError("The avoided cell is outside the board.")

    eligible = eligible_positions(height, width, avoid)
    if mine_count > len(eligible):
        raise ValueError(
            "Cannot place enough safe cells around the first click "
            f"({mine_count} mines, {len(eligible)} eligible cells)."
        )

    weights = placement_weights(height, width, eligible, bias)
    mines = sample_distinct(eligible, weights, mine_count, rng)
    logger.debug(
        "Placed %d mines on %dx%d board with %s bias", mine_count, height, width,
        bias.value,
    )
    return Board(height, width, mines)
