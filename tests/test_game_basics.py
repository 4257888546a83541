import pytest

from tttengine.errors import InvalidPlacement
from tttengine.game_basics import (
    Cell,
    apply_move,
    as_board,
    current_player,
    format_board,
    get_piece_counts,
    get_winner,
    is_draw,
    is_valid_state,
    legal_moves,
    new_board,
    opponent,
    parse_board,
    serialize_board,
)


def test_new_board_is_empty():
    b = new_board()
    assert len(b) == 9
    assert all(c == Cell.EMPTY for c in b)
    assert legal_moves(b) == list(range(9))
    assert current_player(b) == Cell.X


def test_parse_board_accepts_digits_and_symbols():
    assert parse_board("120000000") == parse_board("XO.......")
    assert parse_board(" xo-_00000 ")[:4] == (Cell.X, Cell.O, Cell.EMPTY, Cell.EMPTY)
    assert serialize_board(parse_board("XO.......")) == "120000000"


@pytest.mark.parametrize("bad", ["abc", "0123456789", "12345678x", "", "1200000003"])
def test_parse_board_rejects_malformed(bad: str):
    with pytest.raises(ValueError):
        parse_board(bad)


def test_as_board_normalizes_and_validates():
    assert as_board([None, 1, 2, 0, 0, 0, 0, 0, 0])[:3] == (Cell.EMPTY, Cell.X, Cell.O)
    with pytest.raises(ValueError):
        as_board([0] * 8)
    with pytest.raises(ValueError):
        as_board([0] * 8 + [3])


def test_apply_move_returns_new_board_and_keeps_input():
    b = [0] * 9
    nb = apply_move(b, 4, Cell.X)
    assert nb[4] == Cell.X
    assert b == [0] * 9
    with pytest.raises(InvalidPlacement):
        apply_move(nb, 4, Cell.O)
    with pytest.raises(InvalidPlacement):
        apply_move(nb, 9, Cell.O)
    with pytest.raises(InvalidPlacement):
        apply_move(nb, -1, Cell.O)


def test_counts_turn_and_opponent():
    b = [1, 2, 1, 0, 0, 0, 0, 0, 0]
    assert get_piece_counts(b) == (2, 1)
    assert current_player(b) == Cell.O
    assert opponent(Cell.X) == Cell.O
    assert opponent(Cell.O) == Cell.X
    with pytest.raises(ValueError):
        opponent(Cell.EMPTY)


def test_winner_and_draw():
    assert get_winner([1, 1, 1, 2, 2, 0, 0, 0, 0]) == Cell.X
    assert get_winner([0] * 9) == Cell.EMPTY
    draw = [1, 1, 2, 2, 2, 1, 1, 2, 1]
    assert is_draw(draw)
    assert not is_draw([1, 1, 1, 2, 2, 1, 2, 1, 2])


def test_is_valid_state():
    assert is_valid_state([0] * 9)
    assert is_valid_state([1, 1, 1, 2, 2, 0, 0, 0, 0])
    # O cannot have moved first
    assert not is_valid_state([2, 0, 0, 0, 0, 0, 0, 0, 0])
    # both players completed a line
    assert not is_valid_state([1, 1, 1, 2, 2, 2, 0, 0, 0])
    # X won but O kept playing
    assert not is_valid_state([1, 1, 1, 2, 2, 0, 2, 0, 0])


def test_format_board():
    text = format_board(parse_board("XO......."))
    assert text.splitlines()[0] == " X | O | . "
    assert len(text.splitlines()) == 5
