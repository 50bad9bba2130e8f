"""Tic-tac-toe package exposing game logic, the minimax AI, and the web application."""

from .ai import MinimaxAI, minimax
from .game import Board, TicTacToeGame, has_winner, is_draw
from .ui import app

__all__ = [
    "Board",
    "MinimaxAI",
    "TicTacToeGame",
    "app",
    "has_winner",
    "is_draw",
    "minimax",
]
