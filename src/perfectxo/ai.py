"""Exhaustive minimax AI for PerfectXO."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Dict, Optional

from .game import EMPTY, OPPONENT, Board, Player, is_full, other, winner

logger = logging.getLogger(__name__)

WIN_SCORE = 10


@dataclass
class MinimaxAI:
    """AI player that searches the full game tree on every move.

    Leaves score ``10 - depth`` for an AI win, ``depth - 10`` for a loss and
    ``0`` for a draw, so faster wins and slower losses are preferred.
    Public surface:
      - MinimaxAI(player="O")
      - best_move(board) -> cell index or None
    """

    player: Player = OPPONENT

    @property
    def opponent(self) -> Player:
        return other(self.player)

    # ---- public API ----

    def best_move(self, board: Board) -> Optional[int]:
        """Pick the empty cell with the highest minimax score.

        Ties go to the lowest index. Returns ``None`` if the board is full.
        """
        best_score = -math.inf
        best: Optional[int] = None
        for index, score in self.score_moves(board).items():
            if score > best_score:
                best_score, best = score, index
        if best is not None:
            logger.debug("%s picks cell %d (score %s)", self.player, best, best_score)
        return best

    def score_moves(self, board: Board) -> Dict[int, int]:
        """Score every empty cell, in increasing index order."""
        # Search runs on a private copy; the caller's list is never touched.
        work = list(board)
        scores: Dict[int, int] = {}
        for index in range(len(work)):
            if work[index] != EMPTY:
                continue
            work[index] = self.player
            scores[index] = self._minimax(work, 0, False)
            work[index] = EMPTY
        return scores

    # ---- core search ----

    def _minimax(self, board: Board, depth: int, maximizing: bool) -> int:
        mark = winner(board)
        if mark == self.player:
            return WIN_SCORE - depth
        if mark == self.opponent:
            return depth - WIN_SCORE
        if is_full(board):
            return 0

        if maximizing:
            value = -math.inf
            for index in range(len(board)):
                if board[index] != EMPTY:
                    continue
                board[index] = self.player
                value = max(value, self._minimax(board, depth + 1, False))
                board[index] = EMPTY
        else:
            value = math.inf
            for index in range(len(board)):
                if board[index] != EMPTY:
                    continue
                board[index] = self.opponent
                value = min(value, self._minimax(board, depth + 1, True))
                board[index] = EMPTY
        return int(value)


def best_move(board: Board, player: Player = OPPONENT) -> Optional[int]:
    """Best cell for ``player`` on ``board``; ``None`` when no cell is empty."""
    return MinimaxAI(player=player).best_move(board)
