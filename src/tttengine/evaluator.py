"""
Outcome evaluation for a board snapshot.

Lines are checked in the fixed order of ``WIN_PATTERNS`` (rows, columns,
diagonals); the first completed line decides the winner.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, Tuple

from .game_basics import WIN_PATTERNS, Cell, as_board, get_winner


class Outcome(Enum):
    IN_PROGRESS = "in_progress"
    X_WINS = "x"
    O_WINS = "o"
    DRAW = "draw"

    @classmethod
    def win(cls, mark: Cell) -> "Outcome":
        if mark == Cell.X:
            return cls.X_WINS
        if mark == Cell.O:
            return cls.O_WINS
        raise ValueError(f"Not a player mark: {mark!r}")

    @property
    def is_terminal(self) -> bool:
        return self is not Outcome.IN_PROGRESS

    @property
    def winner(self) -> Optional[Cell]:
        if self is Outcome.X_WINS:
            return Cell.X
        if self is Outcome.O_WINS:
            return Cell.O
        return None

    def describe(self) -> str:
        if self is Outcome.DRAW:
            return "It's a Draw!"
        if self.winner is not None:
            return f"{self.winner.symbol} Wins!"
        return "In progress"


def evaluate(board: Sequence[int]) -> Outcome:
    board = as_board(board)
    w = get_winner(board)
    if w != Cell.EMPTY:
        return Outcome.win(w)
    if Cell.EMPTY in board:
        return Outcome.IN_PROGRESS
    return Outcome.DRAW


def is_terminal(board: Sequence[int]) -> bool:
    return evaluate(board).is_terminal


def winning_line(board: Sequence[int]) -> Optional[Tuple[int, int, int]]:
    board = as_board(board)
    for line in WIN_PATTERNS:
        a, b, c = line
        if board[a] != Cell.EMPTY and board[a] == board[b] == board[c]:
            return line
    return None
