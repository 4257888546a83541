import numpy as np
import pytest

from tttengine.errors import InvalidState
from tttengine.evaluator import Outcome
from tttengine.game_basics import Cell, new_board
from tttengine.solver import (
    WIN_SCORE,
    Difficulty,
    best_move,
    move_values,
    random_move,
    select_move,
    utility,
)


def test_optimal_first_move_is_stable():
    empty = new_board()
    first = select_move(empty, Difficulty.OPTIMAL)
    for _ in range(5):
        assert select_move(empty, Difficulty.OPTIMAL) == first
    # every opening is a draw, so the lowest index is kept
    assert first == 0
    assert move_values(empty) == (0,) * 9


def test_random_moves_cover_all_cells():
    rng = np.random.default_rng(123)
    picks = [select_move([0] * 9, Difficulty.RANDOM, rng=rng) for _ in range(1000)]
    assert all(0 <= p < 9 for p in picks)
    counts = np.bincount(picks, minlength=9)
    assert (counts > 0).all()


def test_random_only_picks_empty_cells():
    b = [1, 2, 1, 0, 2, 0, 1, 0, 0]
    rng = np.random.default_rng(7)
    seen = {random_move(b, rng) for _ in range(200)}
    assert seen == {3, 5, 7, 8}


def test_random_is_reproducible_with_seed():
    a = [select_move([0] * 9, "random", rng=np.random.default_rng(5)) for _ in range(3)]
    b = [select_move([0] * 9, "random", rng=np.random.default_rng(5)) for _ in range(3)]
    assert a == b


@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("board", [
    [1, 1, 1, 2, 2, 0, 0, 0, 0],   # X already won
    [2, 2, 2, 1, 1, 0, 1, 0, 0],   # O already won
    [1, 1, 2, 2, 2, 1, 1, 2, 1],   # full, drawn
])
def test_terminal_board_is_refused(board, difficulty):
    with pytest.raises(InvalidState):
        select_move(board, difficulty)


def test_input_board_is_left_unchanged():
    board = [1, 0, 0, 0, 2, 0, 0, 0, 1]
    snapshot = list(board)
    select_move(board, Difficulty.OPTIMAL)
    select_move(board, Difficulty.RANDOM, rng=np.random.default_rng(0))
    assert board == snapshot


def test_malformed_board_is_rejected():
    with pytest.raises(ValueError):
        select_move([0] * 8, Difficulty.OPTIMAL)
    with pytest.raises(ValueError):
        select_move([0] * 8 + [5], Difficulty.OPTIMAL)


def test_perspective_x_takes_its_own_win():
    b = [1, 1, 0, 2, 2, 0, 0, 0, 0]
    assert select_move(b, Difficulty.OPTIMAL, perspective=Cell.X) == 2


def test_depth_discount_prefers_the_faster_win():
    # Without discount both 2 (win two plies later) and 5 (win now) score +10
    # and the lower index is kept; with discount the immediate win is taken.
    b = [1, 1, 0, 2, 2, 0, 0, 0, 0]
    assert move_values(b) == (None, None, 10, None, None, 10, -10, -10, -10)
    assert select_move(b, Difficulty.OPTIMAL) == 2
    assert select_move(b, Difficulty.OPTIMAL, depth_discount=True) == 5
    discounted = move_values(b, Cell.O, depth_discount=True)
    assert discounted[5] == WIN_SCORE - 1
    assert discounted[2] == WIN_SCORE - 3


def test_utility_signs():
    assert utility(Outcome.O_WINS, Cell.O) == 10
    assert utility(Outcome.X_WINS, Cell.O) == -10
    assert utility(Outcome.X_WINS, Cell.X) == 10
    assert utility(Outcome.DRAW, Cell.O) == 0
    assert utility(Outcome.O_WINS, Cell.O, depth=4) == 10
    assert utility(Outcome.O_WINS, Cell.O, depth=4, depth_discount=True) == 6
    assert utility(Outcome.X_WINS, Cell.O, depth=4, depth_discount=True) == -6
    with pytest.raises(ValueError):
        utility(Outcome.IN_PROGRESS, Cell.O)


def test_difficulty_parse():
    assert Difficulty.parse("Optimal") is Difficulty.OPTIMAL
    assert Difficulty.parse("hard") is Difficulty.OPTIMAL
    assert Difficulty.parse("Easy") is Difficulty.RANDOM
    assert Difficulty.parse(Difficulty.RANDOM) is Difficulty.RANDOM
    with pytest.raises(ValueError):
        Difficulty.parse("impossible")


def test_move_values_mark_occupied_cells_none():
    b = [1, 0, 0, 0, 2, 0, 0, 0, 0]
    values = move_values(b)
    assert values[0] is None and values[4] is None
    assert all(v is not None for i, v in enumerate(values) if i not in (0, 4))
    assert best_move(b) == values.index(max(v for v in values if v is not None))
