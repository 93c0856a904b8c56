"""PerfectXO package exposing game logic, the minimax AI, and the web application."""

from .ai import MinimaxAI, best_move
from .game import GameState, GameStatus, InvalidMove, apply_move, evaluate, reset
from .ui import app

__all__ = [
    "GameState",
    "GameStatus",
    "InvalidMove",
    "MinimaxAI",
    "app",
    "apply_move",
    "best_move",
    "evaluate",
    "reset",
]
