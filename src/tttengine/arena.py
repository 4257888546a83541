"""
Computer-vs-computer games between difficulty policies.

Each side runs the move selector from its own perspective, so OPTIMAL vs
OPTIMAL is plain self-play.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .evaluator import Outcome, evaluate, is_terminal
from .game_basics import Board, Cell, apply_move, new_board, opponent
from .solver import Difficulty, select_move


@dataclass
class GameRecord:
    moves: List[int]
    outcome: Outcome
    board: Board


@dataclass
class MatchResult:
    x_difficulty: Difficulty
    o_difficulty: Difficulty
    games: int = 0
    counts: Dict[Outcome, int] = field(
        default_factory=lambda: {Outcome.X_WINS: 0, Outcome.O_WINS: 0, Outcome.DRAW: 0}
    )

    def rate(self, outcome: Outcome) -> float:
        return self.counts[outcome] / self.games if self.games else 0.0

    def metrics(self) -> Dict[str, float]:
        return {
            "x_win_rate": self.rate(Outcome.X_WINS),
            "o_win_rate": self.rate(Outcome.O_WINS),
            "draw_rate": self.rate(Outcome.DRAW),
        }


def play_game(
    x_difficulty,
    o_difficulty,
    rng: Optional[np.random.Generator] = None,
    depth_discount: bool = False,
) -> GameRecord:
    policies = {Cell.X: Difficulty.parse(x_difficulty), Cell.O: Difficulty.parse(o_difficulty)}
    if rng is None:
        rng = np.random.default_rng()
    board = new_board()
    to_move = Cell.X
    moves: List[int] = []
    while not is_terminal(board):
        mv = select_move(board, policies[to_move], perspective=to_move, rng=rng, depth_discount=depth_discount)
        board = apply_move(board, mv, to_move)
        moves.append(mv)
        to_move = opponent(to_move)
    return GameRecord(moves=moves, outcome=evaluate(board), board=board)


def run_match(
    x_difficulty,
    o_difficulty,
    games: int,
    seed: Optional[int] = None,
    depth_discount: bool = False,
) -> MatchResult:
    if games < 0:
        raise ValueError(f"games must be >= 0, got {games}")
    result = MatchResult(Difficulty.parse(x_difficulty), Difficulty.parse(o_difficulty))
    rng = np.random.default_rng(seed)
    for _ in range(games):
        rec = play_game(result.x_difficulty, result.o_difficulty, rng=rng, depth_discount=depth_discount)
        result.counts[rec.outcome] += 1
        result.games += 1
    logging.debug(
        "match x=%s o=%s games=%d counts=%s",
        result.x_difficulty.value,
        result.o_difficulty.value,
        result.games,
        {k.value: v for k, v in result.counts.items()},
    )
    return result
