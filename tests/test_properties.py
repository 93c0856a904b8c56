"""Property-based checks over random reachable boards."""

from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from perfectxo.ai import MinimaxAI
from perfectxo.game import (
    EMPTY,
    WINNING_LINES,
    GameStatus,
    InvalidMove,
    apply_move,
    evaluate,
    reset,
)


@st.composite
def played_boards(draw, min_moves: int = 0) -> List[str]:
    """Board reached by alternating legal moves, X first, stopping at game end."""
    order = draw(st.permutations(range(9)))
    length = draw(st.integers(min_value=min_moves, max_value=9))
    board = reset()
    mark = "X"
    for index in order[:length]:
        if evaluate(board).is_terminal:
            break
        board = apply_move(board, index, mark)
        mark = "O" if mark == "X" else "X"
    return board


@given(played_boards())
def test_evaluate_matches_lines(board):
    status = evaluate(board)
    assert status in set(GameStatus)
    x_lines = any(all(board[i] == "X" for i in line) for line in WINNING_LINES)
    o_lines = any(all(board[i] == "O" for i in line) for line in WINNING_LINES)
    if status is GameStatus.PLAYER_WINS:
        assert x_lines
    if status is GameStatus.OPPONENT_WINS:
        assert o_lines
    if status is GameStatus.IN_PROGRESS:
        assert EMPTY in board and not x_lines and not o_lines


@given(played_boards())
def test_mark_counts_stay_balanced(board):
    assert board.count("X") - board.count("O") in (0, 1)


@given(played_boards(), st.integers(min_value=0, max_value=8))
def test_terminal_or_occupied_rejects(board, index):
    if evaluate(board).is_terminal or board[index] != EMPTY:
        before = list(board)
        with pytest.raises(InvalidMove):
            apply_move(board, index, "X")
        assert board == before


@settings(max_examples=50, deadline=None)
@given(played_boards(min_moves=4))
def test_best_move_picks_empty_cell_and_preserves_board(board):
    before = list(board)
    move = MinimaxAI().best_move(board)
    assert board == before
    if EMPTY in board:
        assert board[move] == EMPTY
    else:
        assert move is None


@given(st.lists(st.sampled_from(["", "X", "O"]), min_size=9, max_size=9))
def test_evaluate_on_arbitrary_boards(board):
    status = evaluate(board)
    x_lines = any(all(board[i] == "X" for i in line) for line in WINNING_LINES)
    o_lines = any(all(board[i] == "O" for i in line) for line in WINNING_LINES)
    if status is GameStatus.PLAYER_WINS:
        assert x_lines
    elif status is GameStatus.OPPONENT_WINS:
        assert o_lines
    elif status is GameStatus.DRAW:
        assert EMPTY not in board and not x_lines and not o_lines
    else:
        assert status is GameStatus.IN_PROGRESS
        assert EMPTY in board and not x_lines and not o_lines
