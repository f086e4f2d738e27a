"""Difficulty labels, guess-count thresholds and the retry probability model."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def rank(self) -> int:
        """Position in EASY < MEDIUM < HARD order."""
        return _RANKS[self]

    @classmethod
    def from_label(cls, label: str) -> "Difficulty":
        """
        Parse a difficulty label, case-insensitively.

        Raises:
            ValueError: If the label is not easy, medium or hard.
        """
        try:
            return cls(label.strip().lower())
        except ValueError:
            raise ValueError(
                f'difficulty must be "easy", "medium" or "hard", got {label!r}.'
            ) from None


_RANKS: Dict[Difficulty, int] = {
    Difficulty.EASY: 0,
    Difficulty.MEDIUM: 1,
    Difficulty.HARD: 2,
}


@dataclass(frozen=True)
class DifficultyThresholds:
    """
    Guess-count boundaries between difficulty classes.

    A board needing at most ``easy_max`` guesses is EASY, at most ``medium_max``
    is MEDIUM, anything above (including an unsolvable board) is HARD.
    """

    easy_max: int = 0
    medium_max: int = 2

    def __post_init__(self) -> None:
        if self.easy_max < 0:
            raise ValueError("easy_max must be non-negative.")
        if self.medium_max < self.easy_max:
            raise ValueError("medium_max must be >= easy_max.")


DEFAULT_THRESHOLDS = DifficultyThresholds()


def classify_guesses(
    guesses: Union[int, float],
    thresholds: DifficultyThresholds = DEFAULT_THRESHOLDS,
) -> Difficulty:
    """Map a minimum guess count (or the infinite IMPOSSIBLE sentinel) to a Difficulty."""
    if guesses < 0:
        raise ValueError("guesses must be non-negative.")
    if guesses <= thresholds.easy_max:
        return Difficulty.EASY
    if guesses <= thresholds.medium_max:
        return Difficulty.MEDIUM
    return Difficulty.HARD


# Observed match rates for uniformly placed mines on small boards.
UNBIASED_MATCH_PROBABILITY: Dict[Difficulty, float] = {
    Difficulty.EASY: 0.05,
    Difficulty.MEDIUM: 0.60,
    Difficulty.HARD: 0.35,
}


def _check_probability(p: float) -> None:
    if not 0.0 < p <= 1.0:
        raise ValueError("Match probability must be in (0, 1].")


def expected_attempts(p: float) -> float:
    """Expected number of generate/classify attempts until a match (geometric mean 1/p)."""
    _check_probability(p)
    return 1.0 / p


def recommended_max_attempts(p: float, confidence: float = 0.99) -> int:
    """
    Smallest attempt budget whose chance of containing at least one match reaches
    ``confidence``, for a per-attempt match probability ``p``.
    """
    _check_probability(p)
    if not 0.0 < confidence < 1.0:
        raise ValueError("confidence must be in (0, 1).")
    if p == 1.0:
        return 1
    return max(1, math.ceil(math.log(1.0 - confidence) / math.log(1.0 - p)))
