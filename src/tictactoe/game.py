"""Board representation and rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")

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


# ---------- Rules ----------


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


def has_winner(cells: Sequence[str], player: Player) -> bool:
    """True if ``player`` holds all three cells of any winning line."""
    return any(
        cells[a] == player and cells[b] == player and cells[c] == player
        for a, b, c in WINNING_LINES
    )


def is_draw(cells: Sequence[str]) -> bool:
    """True once every cell is occupied.

    A full board can also contain a winning line, so callers check
    ``has_winner`` first.
    """
    return all(c != EMPTY for c in cells)


def validate_cells(cells: Sequence[str]) -> None:
    if len(cells) != 9:
        raise ValueError(f"Board must have 9 cells, got {len(cells)}")
    for idx, c in enumerate(cells):
        if c != EMPTY and c not in PLAYERS:
            raise ValueError(f"Invalid mark {c!r} in cell {idx}")


# ---------- Board ----------


@dataclass
class Board:
    # Server-internal: 'X', 'O', or ' ' (space) for empty
    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)

    def __post_init__(self) -> None:
        validate_cells(self.cells)

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    def is_full(self) -> bool:
        return is_draw(self.cells)

    def has_winner(self, player: Player) -> bool:
        return has_winner(self.cells, player)

    def place(self, player: Player, idx: int) -> None:
        if not 0 <= idx < 9:
            raise ValueError(f"Cell index {idx} is out of range")
        if player not in PLAYERS:
            raise ValueError(f"Unknown player {player!r}")
        if self.cells[idx] != EMPTY:
            raise ValueError("Cell already occupied")
        self.cells[idx] = player

    @contextmanager
    def trial(self, idx: int, player: Player) -> Iterator["Board"]:
        """Place ``player`` at ``idx`` for the duration of the block.

        The cell is emptied again on every exit path, exceptions included.
        """
        self.cells[idx] = player
        try:
            yield self
        finally:
            self.cells[idx] = EMPTY

    def copy(self) -> "Board":
        return Board(cells=self.cells.copy())


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    board: Board = field(default_factory=Board)
    current_player: Player = "X"
    winner: Optional[Player] = None
    drawn: bool = False

    @property
    def over(self) -> bool:
        return self.winner is not None or self.drawn

    # ---- API used by UI & AI ----

    def available_moves(self) -> List[int]:
        if self.over:
            return []
        return self.board.empty_cells()

    def play_move(self, idx: int) -> None:
        """Place the current player's mark, resolve the result, and pass the turn."""
        if self.over:
            raise ValueError("Game already finished")

        player = self.current_player
        self.board.place(player, idx)

        if self.board.has_winner(player):
            self.winner = player
            return
        if self.board.is_full():
            self.drawn = True
            return

        self.current_player = other_player(player)

    def reset(self) -> None:
        self.board = Board()
        self.current_player = "X"
        self.winner = None
        self.drawn = False
