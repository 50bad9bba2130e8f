"""Exhaustive minimax AI for 3x3 tic-tac-toe."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .game import Board, Player, TicTacToeGame, other_player, validate_cells

logger = logging.getLogger(__name__)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


@dataclass(frozen=True)
class MoveScore:
    """Search result: ``index`` is None for terminal positions."""

    index: Optional[int]
    score: int


def minimax(board: Board, player: Player, ai_player: Player) -> MoveScore:
    """Full-depth minimax from the point of view of ``ai_player``.

    ``player`` is the mark to move at this node. Scores are plain terminal
    values (+10 win, -10 loss, 0 draw) with no depth adjustment, so a quick
    win and a slow win look the same. Ties go to the lowest cell index.
    The board is mutated during the search but restored before returning.
    """
    human = other_player(ai_player)

    # Terminal checks: human win first, then AI win, then full board
    if board.has_winner(human):
        return MoveScore(None, LOSS_SCORE)
    if board.has_winner(ai_player):
        return MoveScore(None, WIN_SCORE)
    candidates = board.empty_cells()
    if not candidates:
        return MoveScore(None, DRAW_SCORE)

    maximizing = player == ai_player
    best_index: Optional[int] = None
    best_score = -math.inf if maximizing else math.inf

    for idx in candidates:
        with board.trial(idx, player):
            score = minimax(board, other_player(player), ai_player).score
        if maximizing and score > best_score:
            best_index, best_score = idx, score
        elif not maximizing and score < best_score:
            best_index, best_score = idx, score

    return MoveScore(best_index, int(best_score))


@dataclass
class MinimaxAI:
    """AI player that searches the whole game tree on every turn.

      - MinimaxAI(player="O")
      - choose(game) -> cell_index
    """

    player: Player = "O"

    def evaluate(self, game: TicTacToeGame) -> MoveScore:
        if game.over:
            raise ValueError("Game already finished")
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        validate_cells(game.board.cells)
        if game.board.has_winner("X") or game.board.has_winner("O"):
            raise ValueError("Board already has a winner")
        if game.board.is_full():
            raise ValueError("No valid moves available")

        # Search on a copy so a concurrent reader never sees trial marks
        result = minimax(game.board.copy(), self.player, self.player)
        logger.debug(
            "AI %s picked cell %s (score %s)", self.player, result.index, result.score
        )
        return result

    def choose(self, game: TicTacToeGame) -> int:
        result = self.evaluate(game)
        if result.index is None:
            raise RuntimeError("Search returned no move for a live position")
        return result.index
