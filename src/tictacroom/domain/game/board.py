from __future__ import annotations

from enum import Enum, IntEnum
from typing import Protocol


BOARD_SIZE = 3


class Mark(str, Enum):
    X = "X"
    O = "O"

    @property
    def other(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


FIRST_MOVER = Mark.X


class CellCode(IntEnum):
    """Integer encoding of a cell used by board layout responses."""

    empty = 0
    x = 1
    o = 2

    @classmethod
    def for_mark(cls, mark: Mark | None) -> "CellCode":
        if mark is Mark.X:
            return cls.x
        if mark is Mark.O:
            return cls.o
        return cls.empty


class GameResult(str, Enum):
    pending = "pending"
    win = "win"
    draw = "draw"
    abandoned = "abandoned"


class WinningLine(IntEnum):
    """Line codes understood by clients: rows, then columns, then diagonals."""

    row_0 = 0
    row_1 = 1
    row_2 = 2
    col_0 = 3
    col_1 = 4
    col_2 = 5
    diagonal_topleft = 6
    diagonal_bottomleft = 7

    @property
    def cells(self) -> tuple[tuple[int, int], ...]:
        index = int(self)
        if index < 3:
            return tuple((index, column) for column in range(BOARD_SIZE))
        if index < 6:
            return tuple((row, index - 3) for row in range(BOARD_SIZE))
        if self is WinningLine.diagonal_topleft:
            return tuple((i, i) for i in range(BOARD_SIZE))
        return tuple((BOARD_SIZE - 1 - i, i) for i in range(BOARD_SIZE))


class Board(Protocol):
    """Grid contract consumed by the session layer."""

    def reset(self) -> None:
        ...

    def place(self, mark: Mark, row: int, column: int) -> bool:
        ...

    def is_game_over(self) -> bool:
        ...

    def result(self) -> GameResult:
        ...

    def winning_line(self) -> WinningLine | None:
        ...

    def set_abandoned(self) -> None:
        ...

    def cell_at(self, row: int, column: int) -> Mark | None:
        ...


class GridBoard:
    """In-memory 3x3 board with win and draw detection."""

    def __init__(self) -> None:
        self._cells: list[list[Mark | None]] = []
        self._result = GameResult.pending
        self._winning_line: WinningLine | None = None
        self.reset()

    def reset(self) -> None:
        self._cells = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self._result = GameResult.pending
        self._winning_line = None

    def place(self, mark: Mark, row: int, column: int) -> bool:
        if self._result is not GameResult.pending:
            return False
        if not (_is_index(row) and _is_index(column)):
            return False
        if self._cells[row][column] is not None:
            return False

        self._cells[row][column] = mark
        self._update_result(mark)
        return True

    def is_game_over(self) -> bool:
        return self._result is not GameResult.pending

    def result(self) -> GameResult:
        return self._result

    def winning_line(self) -> WinningLine | None:
        return self._winning_line

    def set_abandoned(self) -> None:
        self._result = GameResult.abandoned
        self._winning_line = None

    def cell_at(self, row: int, column: int) -> Mark | None:
        if not (_is_index(row) and _is_index(column)):
            raise IndexError(f"Cell ({row}, {column}) is outside the board.")
        return self._cells[row][column]

    def _update_result(self, mark: Mark) -> None:
        for line in WinningLine:
            if all(self._cells[row][column] is mark for row, column in line.cells):
                self._result = GameResult.win
                self._winning_line = line
                return

        if all(cell is not None for row in self._cells for cell in row):
            self._result = GameResult.draw


def _is_index(value: object) -> bool:
    # bool is an int subclass; reject it so `true` is not read as 1.
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < BOARD_SIZE


def board_layout(board: Board) -> list[int]:
    """Flatten the grid row-major into cell codes."""
    return [
        int(CellCode.for_mark(board.cell_at(row, column)))
        for row in range(BOARD_SIZE)
        for column in range(BOARD_SIZE)
    ]


def winning_mark(board: Board) -> Mark | None:
    line = board.winning_line()
    if board.result() is not GameResult.win or line is None:
        return None
    row, column = line.cells[0]
    return board.cell_at(row, column)


__all__ = [
    "BOARD_SIZE",
    "Board",
    "CellCode",
    "FIRST_MOVER",
    "GameResult",
    "GridBoard",
    "Mark",
    "WinningLine",
    "board_layout",
    "winning_mark",
]
