"""Grid geometry helpers shared by the board model, generator and search."""

from typing import Dict, Tuple

Position = Tuple[int, int]
Neighborhoods = Dict[Position, Tuple[Position, ...]]

# Row/column steps to the eight surrounding cells, in row-major order.
KING_STEPS: Tuple[Position, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)

# One shared table per board shape: (height, width) -> neighborhoods
_SHAPE_TABLES: Dict[Position, Neighborhoods] = {}


def get_neighborhoods(height: int, width: int) -> Neighborhoods:
    """
    Return the 8-connected neighbors of every cell of a height x width grid.

    The table is built once per shape and shared by every board of that shape,
    so callers must treat it as read-only.

    Raises:
        ValueError: If height or width is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("height and width must be positive.")

    table = _SHAPE_TABLES.get((height, width))
    if table is None:
        table = {
            (row, col): tuple(
                (row + dr, col + dc)
                for dr, dc in KING_STEPS
                if 0 <= row + dr < height and 0 <= col + dc < width
            )
            for row in range(height)
            for col in range(width)
        }
        _SHAPE_TABLES[(height, width)] = table
    return table


def chebyshev_distance(a: Position, b: Position) -> int:
    """King-move distance; 1 means the cells touch."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))
