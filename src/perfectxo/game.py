"""Core rules for PerfectXO: board model, move application and status checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

Player = str  # "X" or "O"
Board = List[str]

PLAYER: Player = "X"  # human, always moves first
OPPONENT: Player = "O"  # computer
EMPTY = ""
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    PLAYER_WINS = "player_wins"
    OPPONENT_WINS = "opponent_wins"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


class InvalidMove(ValueError):
    """Raised when a move targets a bad index, an occupied cell or a finished game."""


# ---------- Board functions ----------


def reset() -> Board:
    """Return a fresh empty board."""
    return [EMPTY] * BOARD_SIZE


def other(mark: Player) -> Player:
    return OPPONENT if mark == PLAYER else PLAYER


def is_full(board: Board) -> bool:
    return all(c != EMPTY for c in board)


def available_moves(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def winning_line(board: Board) -> Optional[Tuple[int, int, int]]:
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return (a, b, c)
    return None


def winner(board: Board) -> Optional[Player]:
    line = winning_line(board)
    return board[line[0]] if line else None


def evaluate(board: Board) -> GameStatus:
    """Derive the status of ``board`` from scratch.

    A completed line decides the game for the mark holding it; a full board
    without one is a draw.
    """
    mark = winner(board)
    if mark == PLAYER:
        return GameStatus.PLAYER_WINS
    if mark == OPPONENT:
        return GameStatus.OPPONENT_WINS
    if is_full(board):
        return GameStatus.DRAW
    return GameStatus.IN_PROGRESS


def apply_move(board: Board, index: int, mark: Player) -> Board:
    """Return a copy of ``board`` with ``mark`` placed at ``index``.

    The input board is left untouched whether or not the move is accepted.
    """
    if mark not in (PLAYER, OPPONENT):
        raise InvalidMove(f"Unknown mark {mark!r}")
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidMove(f"Cell index must be an integer, got {index!r}")
    if not 0 <= index < BOARD_SIZE:
        raise InvalidMove(f"Cell index {index} is out of range")
    if evaluate(board).is_terminal:
        raise InvalidMove("Game already finished")
    if board[index] != EMPTY:
        raise InvalidMove("Cell already occupied")
    new_board = list(board)
    new_board[index] = mark
    return new_board


# ---------- Game ----------


@dataclass
class GameState:
    board: Board = field(default_factory=reset)
    current_player: Player = PLAYER

    # ---- API used by UI & AI ----

    @property
    def status(self) -> GameStatus:
        return evaluate(self.board)

    @property
    def is_over(self) -> bool:
        return self.status.is_terminal

    def available_moves(self) -> List[int]:
        if self.is_over:
            return []
        return available_moves(self.board)

    def play_move(self, index: int) -> None:
        """Place the current player's mark at ``index`` and pass the turn."""
        self.board = apply_move(self.board, index, self.current_player)
        self.current_player = other(self.current_player)

    def reset(self) -> None:
        self.board = reset()
        self.current_player = PLAYER

    def clone(self) -> "GameState":
        return GameState(board=list(self.board), current_player=self.current_player)
