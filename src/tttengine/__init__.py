"""tttengine package.

Tic-tac-toe game engine: board model, outcome evaluation, a computer
opponent (random or minimax), game sessions and a terminal CLI.

Convenience imports are exposed for common workflows.
"""

from .errors import GameError, InvalidPlacement, InvalidState
from .evaluator import Outcome, evaluate
from .game_basics import Cell, new_board
from .session import GameSession, Mode
from .solver import Difficulty, select_move

__all__ = [
    "Cell",
    "new_board",
    "Outcome",
    "evaluate",
    "Difficulty",
    "select_move",
    "GameSession",
    "Mode",
    "GameError",
    "InvalidState",
    "InvalidPlacement",
]
