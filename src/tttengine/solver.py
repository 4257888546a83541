"""
Move selection for the automated player.

Difficulty policies:
- RANDOM: uniform choice among empty cells, no look-ahead.
- OPTIMAL: exhaustive minimax (memoized) from the side of ``perspective``,
  the automated player's mark (O by default).

Utility at terminal boards: win +10, loss -10, draw 0. Depth (plies from the
root) is tracked but only enters the utility with ``depth_discount=True``
(win ``10 - depth``, loss ``depth - 10``), which prefers faster wins and
slower losses.
Tie-break: cells are scanned in ascending order and the first strictly
greatest value is kept.
"""
from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidState
from .evaluator import Outcome, evaluate
from .game_basics import Board, Cell, as_board, legal_moves, opponent

WIN_SCORE = 10

_DIFFICULTY_ALIASES = {"easy": "random", "hard": "optimal"}


class Difficulty(Enum):
    RANDOM = "random"
    OPTIMAL = "optimal"

    @classmethod
    def parse(cls, name) -> "Difficulty":
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        key = _DIFFICULTY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {name!r}") from None


def utility(outcome: Outcome, perspective: Cell, depth: int = 0, depth_discount: bool = False) -> int:
    """Signed value of a terminal outcome for ``perspective``."""
    if outcome is Outcome.DRAW:
        return 0
    winner = outcome.winner
    if winner is None:
        raise ValueError("utility() needs a terminal outcome")
    score = WIN_SCORE - depth if depth_discount else WIN_SCORE
    return score if winner == perspective else -score


def _place(board_t: Board, idx: int, mark: Cell) -> Board:
    return board_t[:idx] + (mark,) + board_t[idx + 1:]


@lru_cache(maxsize=None)
def _minimax(board_t: Board, to_move: Cell, perspective: Cell, depth: int, depth_discount: bool) -> int:
    outcome = evaluate(board_t)
    if outcome.is_terminal:
        return utility(outcome, perspective, depth, depth_discount)
    maximizing = to_move == perspective
    nxt = opponent(to_move)
    best: Optional[int] = None
    for idx in legal_moves(board_t):
        v = _minimax(_place(board_t, idx, to_move), nxt, perspective, depth + 1, depth_discount)
        if best is None or (v > best if maximizing else v < best):
            best = v
    return best  # type: ignore[return-value]


def clear_search_cache() -> None:
    _minimax.cache_clear()


def _require_in_progress(board: Sequence[int]) -> Board:
    b = as_board(board)
    outcome = evaluate(b)
    if outcome is Outcome.DRAW:
        raise InvalidState("No empty cell left on the board")
    if outcome.is_terminal:
        raise InvalidState(f"Game is already decided: {outcome.describe()}")
    return b


def move_values(
    board: Sequence[int],
    perspective: Cell = Cell.O,
    depth_discount: bool = False,
) -> Tuple[Optional[int], ...]:
    """Minimax value of placing ``perspective`` at each cell (None for occupied cells)."""
    b = _require_in_progress(board)
    perspective = Cell(perspective)
    opp = opponent(perspective)
    values: List[Optional[int]] = [None] * len(b)
    for idx in legal_moves(b):
        values[idx] = _minimax(_place(b, idx, perspective), opp, perspective, 1, depth_discount)
    return tuple(values)


def best_move(board: Sequence[int], perspective: Cell = Cell.O, depth_discount: bool = False) -> int:
    values = move_values(board, perspective, depth_discount)
    best_idx = -1
    best_val: Optional[int] = None
    for idx, v in enumerate(values):
        if v is None:
            continue
        if best_val is None or v > best_val:
            best_val = v
            best_idx = idx
    logging.debug("best_move perspective=%s value=%s values=%s", Cell(perspective).symbol, best_val, values)
    return best_idx


def random_move(board: Sequence[int], rng: Optional[np.random.Generator] = None) -> int:
    moves = legal_moves(_require_in_progress(board))
    if rng is None:
        rng = np.random.default_rng()
    return moves[int(rng.integers(len(moves)))]


def select_move(
    board: Sequence[int],
    difficulty,
    perspective: Cell = Cell.O,
    rng: Optional[np.random.Generator] = None,
    depth_discount: bool = False,
) -> int:
    """Pick the automated player's cell for ``board``.

    Raises InvalidState if the board is full or already won. The board passed
    in is never modified.
    """
    difficulty = Difficulty.parse(difficulty)
    if difficulty is Difficulty.RANDOM:
        move = random_move(board, rng)
    else:
        move = best_move(board, perspective, depth_discount)
    logging.debug("select_move difficulty=%s move=%d", difficulty.value, move)
    return move
