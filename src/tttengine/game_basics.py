"""
Game basics: board representation, serialization, counts and validity.

- A board is 9 cells in row-major order: 0=empty, 1=X, 2=O. X always starts.
- Functions take any length-9 sequence and return new tuples; the caller's
  board object is never modified.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Iterable, List, Sequence, Tuple

from .errors import InvalidPlacement


class Cell(IntEnum):
    EMPTY = 0
    X = 1
    O = 2

    @property
    def symbol(self) -> str:
        return {Cell.EMPTY: '.', Cell.X: 'X', Cell.O: 'O'}[self]


Board = Tuple[Cell, ...]

BOARD_SIZE = 9

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

_CHAR_TO_CELL = {
    '0': Cell.EMPTY, '.': Cell.EMPTY, '-': Cell.EMPTY, '_': Cell.EMPTY,
    '1': Cell.X, 'X': Cell.X,
    '2': Cell.O, 'O': Cell.O,
}


def new_board() -> Board:
    return (Cell.EMPTY,) * BOARD_SIZE


def as_board(cells: Iterable) -> Board:
    """Normalize a sequence of 9 cell values to a tuple of ``Cell``.

    Accepts ints, ``Cell`` members and ``None`` for empty. Raises ValueError
    on anything else.
    """
    out: List[Cell] = []
    for v in cells:
        if v is None:
            out.append(Cell.EMPTY)
            continue
        try:
            out.append(Cell(v))
        except ValueError:
            raise ValueError(f"Invalid cell value: {v!r}") from None
    if len(out) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(out)}")
    return tuple(out)


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(int(cell)) for cell in board)


def parse_board(raw: str) -> Board:
    """Parse a 9-character board string such as ``"120000000"`` or ``"XO......."``."""
    s = raw.strip().upper()
    if len(s) != BOARD_SIZE or any(c not in _CHAR_TO_CELL for c in s):
        raise ValueError("Invalid board string. Must be 9 chars of 0/1/2 (or ./X/O).")
    return tuple(_CHAR_TO_CELL[c] for c in s)


def format_board(board: Sequence[int]) -> str:
    rows = []
    for r in range(3):
        rows.append(' ' + ' | '.join(Cell(board[r * 3 + c]).symbol for c in range(3)) + ' ')
    return '\n---+---+---\n'.join(rows)


def opponent(mark: Cell) -> Cell:
    if mark == Cell.X:
        return Cell.O
    if mark == Cell.O:
        return Cell.X
    raise ValueError(f"Not a player mark: {mark!r}")


def get_piece_counts(board: Sequence[int]) -> Tuple[int, int]:
    return sum(1 for v in board if v == Cell.X), sum(1 for v in board if v == Cell.O)


def current_player(board: Sequence[int]) -> Cell:
    x, o = get_piece_counts(board)
    return Cell.X if x == o else Cell.O


def legal_moves(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == Cell.EMPTY]


def apply_move(board: Sequence[int], idx: int, mark: Cell) -> Board:
    """Return a new board with ``mark`` placed at ``idx``."""
    if not 0 <= idx < BOARD_SIZE:
        raise InvalidPlacement(f"Cell index out of range: {idx}")
    if board[idx] != Cell.EMPTY:
        raise InvalidPlacement(f"Cell {idx} is already occupied")
    lst = list(board)
    lst[idx] = mark
    return tuple(Cell(v) for v in lst)


def get_winner(board: Sequence[int]) -> Cell:
    """First completed line's mark in WIN_PATTERNS order, or Cell.EMPTY."""
    for a, b, c in WIN_PATTERNS:
        v = board[a]
        if v != Cell.EMPTY and v == board[b] and v == board[c]:
            return Cell(v)
    return Cell.EMPTY


def is_draw(board: Sequence[int]) -> bool:
    return Cell.EMPTY not in board and get_winner(board) == Cell.EMPTY


def is_valid_state(board: Sequence[int]) -> bool:
    """True if the board can arise from legal play starting with X."""
    x_count, o_count = get_piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False

    def count_wins(p: Cell) -> int:
        return sum(1 for pat in WIN_PATTERNS if all(board[i] == p for i in pat))

    x_wins, o_wins = count_wins(Cell.X), count_wins(Cell.O)
    if x_wins and o_wins:
        return False
    if x_wins and x_count != o_count + 1:
        return False
    if o_wins and x_count != o_count:
        return False
    return True
