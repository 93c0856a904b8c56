"""Unit tests for PerfectXO game logic."""

import pytest

from perfectxo.game import (
    EMPTY,
    GameState,
    GameStatus,
    InvalidMove,
    WINNING_LINES,
    apply_move,
    available_moves,
    evaluate,
    reset,
)


def test_reset_returns_fresh_empty_board():
    board = reset()
    assert board == [EMPTY] * 9
    board[0] = "X"
    assert reset() == [EMPTY] * 9


def test_initial_state_allows_every_cell():
    game = GameState()
    assert game.status is GameStatus.IN_PROGRESS
    assert game.current_player == "X"
    assert game.available_moves() == list(range(9))


@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_wins_for_either_mark(line):
    board = reset()
    for i in line:
        board[i] = "X"
    assert evaluate(board) is GameStatus.PLAYER_WINS
    board = reset()
    for i in line:
        board[i] = "O"
    assert evaluate(board) is GameStatus.OPPONENT_WINS


def test_full_board_without_line_is_draw():
    board = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
    assert evaluate(board) is GameStatus.DRAW


def test_win_on_last_cell_beats_draw():
    board = ["X", "O", "X", "O", "X", "O", "O", "X", "X"]
    assert evaluate(board) is GameStatus.PLAYER_WINS


def test_apply_move_returns_copy():
    board = reset()
    result = apply_move(board, 4, "X")
    assert result[4] == "X"
    assert board == reset()


@pytest.mark.parametrize("index", [-1, 9, 42])
def test_out_of_range_index_rejected(index):
    with pytest.raises(InvalidMove):
        apply_move(reset(), index, "X")


def test_occupied_cell_rejected():
    board = apply_move(reset(), 0, "X")
    with pytest.raises(InvalidMove):
        apply_move(board, 0, "O")
    assert board[0] == "X"


def test_unknown_mark_rejected():
    with pytest.raises(InvalidMove):
        apply_move(reset(), 0, "Z")


def test_finished_board_rejects_every_index():
    board = ["X", "X", "X", "O", "O", "", "", "", ""]
    before = list(board)
    for index in range(9):
        with pytest.raises(InvalidMove):
            apply_move(board, index, "O")
    assert board == before


def test_play_move_alternates_players():
    game = GameState()
    game.play_move(4)
    assert game.board[4] == "X"
    assert game.current_player == "O"
    game.play_move(0)
    assert game.board[0] == "O"
    assert game.current_player == "X"


def test_failed_move_keeps_turn():
    game = GameState()
    game.play_move(4)
    with pytest.raises(InvalidMove):
        game.play_move(4)
    assert game.current_player == "O"


def test_game_over_blocks_moves_until_reset():
    game = GameState()
    for index in (0, 3, 1, 4, 2):
        game.play_move(index)
    assert game.status is GameStatus.PLAYER_WINS
    assert game.is_over
    assert game.available_moves() == []
    with pytest.raises(InvalidMove):
        game.play_move(8)

    game.reset()
    assert game.status is GameStatus.IN_PROGRESS
    assert game.current_player == "X"
    assert available_moves(game.board) == list(range(9))


def test_clone_is_independent():
    game = GameState()
    game.play_move(0)
    copy = game.clone()
    copy.play_move(1)
    assert game.board[1] == EMPTY
    assert game.current_player == "O"
