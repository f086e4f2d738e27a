"""Minesweeper board model: cell contents, cell states, geometry and reveal logic."""

from collections import deque
from enum import Enum
from typing import (
    Deque,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from .utils import Neighborhoods, Position, get_neighborhoods

# Cell contents:
#   MINE  -> the cell holds a mine
#   EMPTY -> no adjacent mines
#   1..8  -> number of adjacent mines
MINE = -1
EMPTY = 0


class CellState(Enum):
    """State of a cell as seen by the player, orthogonal to its content."""

    COVERED = "covered"
    UNCOVERED = "uncovered"
    FLAGGED = "flagged"


class BoardSize(Enum):
    """Standard board presets as (height, width, mines)."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    def params(self) -> Tuple[int, int, int]:
        """Return the (height, width, mines) tuple for this preset."""
        return _BOARD_SIZE_PARAMS[self]

    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_params(cls, height: int, width: int, mines: int) -> "BoardSize":
        """Return the preset matching the parameters, falling back to SMALL."""
        for size, params in _BOARD_SIZE_PARAMS.items():
            if params == (height, width, mines):
                return size
        return cls.SMALL


_BOARD_SIZE_PARAMS: Dict[BoardSize, Tuple[int, int, int]] = {
    BoardSize.SMALL: (8, 8, 10),
    BoardSize.MEDIUM: (16, 16, 40),
    BoardSize.LARGE: (24, 24, 99),
}


class Board:
    """
    Minesweeper board holding cell contents, player-visible states and the mine set.

    The mine set is the single source of truth for mine placement: cell contents
    are derived from it, and ``mine_count`` is always its size.
    """

    def __init__(
        self,
        height: int,
        width: int,
        mines: Iterable[Position] = (),
    ) -> None:
        """
        Initialize a fully covered board.

        Args:
            height: Board height (number of rows), must be > 0.
            width: Board width (number of columns), must be > 0.
            mines: Positions (row, col) holding a mine.

        Raises:
            ValueError: If dimensions are invalid or a mine lies outside the board.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")

        self.height: int = height
        self.width: int = width

        self._neighborhoods: Neighborhoods = get_neighborhoods(height, width)

        mine_set: Set[Position] = set()
        for row, col in mines:
            if not self.in_bounds(row, col):
                raise ValueError(f"Mine position {(row, col)} is outside the board.")
            mine_set.add((row, col))
        self._mine_positions: Set[Position] = mine_set

        self.cells: List[List[int]] = [
            [EMPTY for _ in range(width)] for _ in range(height)
        ]
        self.states: List[List[CellState]] = [
            [CellState.COVERED for _ in range(width)] for _ in range(height)
        ]
        self.calculate_numbers()

    @classmethod
    def from_layout(cls, rows: Sequence[str]) -> "Board":
        """
        Build a covered board from strings, one per row: '*' marks a mine.

        Example:
            Board.from_layout(["*.", ".."]) is a 2x2 board with a mine at (0, 0).
        """
        if not rows:
            raise ValueError("Layout must contain at least one row.")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("All layout rows must have the same length.")

        mines = [
            (row, col)
            for row, line in enumerate(rows)
            for col, ch in enumerate(line)
            if ch == "*"
        ]
        return cls(len(rows), width, mines)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def mine_count(self) -> int:
        return len(self._mine_positions)

    @property
    def mine_positions(self) -> FrozenSet[Position]:
        return frozenset(self._mine_positions)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def cell(self, row: int, col: int) -> Optional[int]:
        """Return the cell content at (row, col), or None when out of bounds."""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def cell_state(self, row: int, col: int) -> Optional[CellState]:
        """Return the cell state at (row, col), or None when out of bounds."""
        if not self.in_bounds(row, col):
            return None
        return self.states[row][col]

    def neighbors(self, row: int, col: int) -> Tuple[Position, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(row, col)]

    def positions(self) -> List[Position]:
        """All positions in row-major order."""
        return [(r, c) for r in range(self.height) for c in range(self.width)]

    def covered_positions(self) -> List[Position]:
        """Positions not yet uncovered (covered or flagged), in row-major order."""
        return [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if self.states[r][c] != CellState.UNCOVERED
        ]

    # -------------------------------------------------------------------------
    # Cell manipulation
    # -------------------------------------------------------------------------

    def flag_cell(self, row: int, col: int) -> None:
        if self.in_bounds(row, col) and self.states[row][col] == CellState.COVERED:
            self.states[row][col] = CellState.FLAGGED

    def unflag_cell(self, row: int, col: int) -> None:
        if self.in_bounds(row, col) and self.states[row][col] == CellState.FLAGGED:
            self.states[row][col] = CellState.COVERED

    def uncover_cell(self, row: int, col: int) -> None:
        if self.in_bounds(row, col):
            self.states[row][col] = CellState.UNCOVERED

    # -------------------------------------------------------------------------
    # Mine and number logic
    # -------------------------------------------------------------------------

    def calculate_numbers(self) -> None:
        """Populate every cell from the mine set: MINE, EMPTY or its adjacent mine count."""
        for row in range(self.height):
            for col in range(self.width):
                if (row, col) in self._mine_positions:
                    self.cells[row][col] = MINE
                    continue

                self.cells[row][col] = sum(
                    1 for pos in self.neighbors(row, col) if pos in self._mine_positions
                )

    def flood_fill(self, row: int, col: int) -> List[Tuple[int, int, int]]:
        """
        Reveal a connected region starting at (row, col) using Minesweeper flood fill rules.

        Flagged cells are never revealed by the wave.

        Args:
            row: Row of the starting cell.
            col: Column of the starting cell.

        Returns:
            Newly revealed cells as (row, col, wave_distance), where the distance
            counts BFS steps from the starting cell.
        """
        frontier: Deque[Tuple[int, int, int]] = deque([(row, col, 0)])
        visited: Set[Position] = {(row, col)}
        revealed_cells: List[Tuple[int, int, int]] = []

        while frontier:
            r, c, dist = frontier.popleft()
            if self.states[r][c] == CellState.UNCOVERED:
                continue

            self.states[r][c] = CellState.UNCOVERED
            revealed_cells.append((r, c, dist))

            if self.cells[r][c] == EMPTY:
                for nr, nc in self.neighbors(r, c):
                    if (nr, nc) in visited or self.states[nr][nc] != CellState.COVERED:
                        continue
                    visited.add((nr, nc))
                    frontier.append((nr, nc, dist + 1))

        return revealed_cells

    def reveal(self, row: int, col: int) -> List[Tuple[int, int, int]]:
        """
        Reveal a single cell, flood filling when it is empty.

        Returns:
            The newly revealed cells (see flood_fill). Revealing a mine uncovers
            only that cell; revealing an uncovered cell is a no-op.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        if not self.in_bounds(row, col):
            raise ValueError("Cell coordinates are outside the board.")
        if self.states[row][col] == CellState.UNCOVERED:
            return []
        if self.cells[row][col] == MINE:
            self.states[row][col] = CellState.UNCOVERED
            return [(row, col, 0)]
        return self.flood_fill(row, col)

    def copy(self) -> "Board":
        """Return an independent copy (cells, states and mine set)."""
        clone = Board(self.height, self.width, self._mine_positions)
        clone.cells = [row[:] for row in self.cells]
        clone.states = [row[:] for row in self.states]
        return clone

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def cell_symbol(self, row: int, col: int, reveal_all: bool = False) -> str:
        """Plain one-character symbol for a cell: '.', 'F', 'M' or its number."""
        state = self.states[row][col]
        if not reveal_all and state == CellState.COVERED:
            return "."
        if not reveal_all and state == CellState.FLAGGED:
            return "F"
        v = self.cells[row][col]
        return "M" if v == MINE else str(v)

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying values.
            color: If False, omit ANSI color codes.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        w, h = self.width, self.height
        c = self._c if color else str
        m = self._m if color else str

        def cell_str(row: int, col: int) -> str:
            s = self.cell_symbol(row, col, reveal_all)
            return m(s) if s == "M" else s

        # Header: column coordinates
        header_cells = " ".join(f"{col:2d}" for col in range(w))
        out = [c("   ") + c(header_cells)]

        out.append(c("   " + "-" * (3 * w - 1)))

        # Rows with row coordinate at left
        for row in range(h):
            row_cells = " ".join(f" {cell_str(row, col)}" for col in range(w))
            out.append(c(f"{row:2d} ") + c("|") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current visible board state to stdout."""
        print(self.format_board(reveal_all=False))

    def print_full_board(self) -> None:
        """Print the fully revealed underlying board to stdout (for debugging)."""
        print(self.format_board(reveal_all=True))
