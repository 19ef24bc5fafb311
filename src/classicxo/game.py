"""Core rules for ClassicXO: marks, the 3x3 board and terminal detection."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple


class Mark(str, Enum):
    """Content of a single cell."""

    EMPTY = " "
    X = "X"
    O = "O"

    @property
    def opponent(self) -> "Mark":
        if self is Mark.X:
            return Mark.O
        if self is Mark.O:
            return Mark.X
        raise ValueError("EMPTY has no opponent")


Line = Tuple[int, int, int]

# Scan order is fixed; winning_line() reports the first match.
WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

SIZE = 3
CELL_COUNT = SIZE * SIZE


class CellOccupied(ValueError):
    """Raised when writing to a cell that already holds a mark."""

    def __init__(self, index: int, mark: Mark):
        super().__init__(f"Cell {index} already occupied by {mark.value}")
        self.index = index
        self.mark = mark


class Board:
    """Fixed 3x3 grid addressed by flat index ``row * 3 + col``."""

    def __init__(self) -> None:
        self._cells: List[Mark] = [Mark.EMPTY] * CELL_COUNT

    @classmethod
    def from_cells(cls, cells: Sequence[Mark | str]) -> "Board":
        """Build a board from nine marks (or their one-char values)."""
        if len(cells) != CELL_COUNT:
            raise ValueError(f"Expected {CELL_COUNT} cells, got {len(cells)}")
        board = cls()
        board._cells = [Mark(c) for c in cells]
        return board

    @staticmethod
    def index(row: int, col: int) -> int:
        if not (0 <= row < SIZE and 0 <= col < SIZE):
            raise IndexError(f"Cell ({row}, {col}) is off the board")
        return row * SIZE + col

    @property
    def cells(self) -> Tuple[Mark, ...]:
        return tuple(self._cells)

    def get(self, index: int) -> Mark:
        self._check_index(index)
        return self._cells[index]

    def set(self, index: int, mark: Mark) -> None:
        self._check_index(index)
        if mark is Mark.EMPTY:
            raise ValueError("Use clear() to empty the board")
        current = self._cells[index]
        if current is not Mark.EMPTY:
            raise CellOccupied(index, current)
        self._cells[index] = mark

    def clear(self) -> None:
        self._cells = [Mark.EMPTY] * CELL_COUNT

    def is_full(self) -> bool:
        return all(c is not Mark.EMPTY for c in self._cells)

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self._cells) if c is Mark.EMPTY]

    def count(self, mark: Mark) -> int:
        return self._cells.count(mark)

    def winning_line(self, mark: Mark) -> Optional[Line]:
        if mark is Mark.EMPTY:
            return None
        cells = self._cells
        for line in WINNING_LINES:
            a, b, c = line
            if cells[a] is mark and cells[b] is mark and cells[c] is mark:
                return line
        return None

    @contextmanager
    def hypothetical(self, index: int, mark: Mark) -> Iterator[None]:
        """Place ``mark`` for the duration of the block, then remove it."""
        self.set(index, mark)
        try:
            yield
        finally:
            self._cells[index] = Mark.EMPTY

    def _check_index(self, index: int) -> None:
        if not 0 <= index < CELL_COUNT:
            raise IndexError(f"Cell index {index} is outside 0..{CELL_COUNT - 1}")

    def __str__(self) -> str:
        rows = []
        for r in range(SIZE):
            row = self._cells[r * SIZE : (r + 1) * SIZE]
            rows.append(" | ".join(c.value for c in row))
        return "\n---------\n".join(rows)

    def __repr__(self) -> str:
        return f"Board({''.join(c.value for c in self._cells)!r})"
