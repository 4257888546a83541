"""
Game session: the stateful collaborator around the pure engine.

A session owns the board, whose turn it is, the play mode, the opponent
difficulty and the running score. Terminal outcomes are reported to
subscribers (sound, confetti and score display live there, not in the core).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import numpy as np

from .errors import InvalidPlacement, InvalidState
from .evaluator import Outcome, evaluate
from .game_basics import Board, Cell, apply_move, new_board, opponent
from .solver import Difficulty, select_move

Observer = Callable[[Outcome], None]

AI_MARK = Cell.O


class Mode(Enum):
    PVP = "pvp"
    AI = "ai"

    @classmethod
    def parse(cls, name) -> "Mode":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown mode: {name!r}") from None


@dataclass
class Scoreboard:
    x: int = 0
    o: int = 0
    draw: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.X_WINS:
            self.x += 1
        elif outcome is Outcome.O_WINS:
            self.o += 1
        elif outcome is Outcome.DRAW:
            self.draw += 1

    def __str__(self) -> str:
        return f"Score - X: {self.x} | O: {self.o} | Draw: {self.draw}"


class GameSession:
    def __init__(
        self,
        mode: Mode = Mode.AI,
        difficulty: Difficulty = Difficulty.RANDOM,
        rng: Optional[np.random.Generator] = None,
        depth_discount: bool = False,
    ):
        self.mode = Mode.parse(mode)
        self.difficulty = Difficulty.parse(difficulty)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.depth_discount = depth_discount
        self.scores = Scoreboard()
        self.board: Board = new_board()
        self.turn: Cell = Cell.X
        self.outcome: Outcome = Outcome.IN_PROGRESS
        self.history: List[int] = []
        self._observers: List[Observer] = []

    @property
    def finished(self) -> bool:
        return self.outcome.is_terminal

    @property
    def ai_pending(self) -> bool:
        return self.mode is Mode.AI and self.turn == AI_MARK and not self.finished

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Register ``callback`` for terminal outcomes; returns an unsubscribe function."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def play(self, index: int) -> Outcome:
        """Apply a human placement for the side to move."""
        if self.finished:
            raise InvalidPlacement("Game is already over")
        if self.ai_pending:
            raise InvalidPlacement("It is the computer's turn")
        return self._place(index)

    def play_ai(self) -> int:
        """Let the automated player move; returns the chosen cell."""
        if not self.ai_pending:
            raise InvalidState("No computer move is pending")
        move = select_move(
            self.board,
            self.difficulty,
            perspective=AI_MARK,
            rng=self.rng,
            depth_discount=self.depth_discount,
        )
        self._place(move)
        return move

    def reset(self) -> None:
        self.board = new_board()
        self.turn = Cell.X
        self.outcome = Outcome.IN_PROGRESS
        self.history = []

    def set_mode(self, mode: Mode) -> None:
        self.mode = Mode.parse(mode)
        self.reset()

    def set_difficulty(self, difficulty: Difficulty) -> None:
        self.difficulty = Difficulty.parse(difficulty)

    def _place(self, index: int) -> Outcome:
        self.board = apply_move(self.board, index, self.turn)
        self.history.append(index)
        self.outcome = evaluate(self.board)
        if self.outcome.is_terminal:
            self.scores.record(self.outcome)
            logging.info("game over: %s (%s)", self.outcome.value, self.scores)
            for cb in list(self._observers):
                cb(self.outcome)
        else:
            self.turn = opponent(self.turn)
        return self.outcome
