"""Unit tests for tic-tac-toe board rules and game flow."""

import pytest

from tictactoe.game import (
    EMPTY,
    WINNING_LINES,
    Board,
    TicTacToeGame,
    has_winner,
    is_draw,
    other_player,
    validate_cells,
)


def _cells(layout: str) -> list:
    """Build a board from a 9-char string, '.' for empty."""
    return [EMPTY if c == "." else c for c in layout]


@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_is_a_win_for_its_owner_only(line):
    cells = [EMPTY] * 9
    for idx in line:
        cells[idx] = "X"
    assert has_winner(cells, "X")
    assert not has_winner(cells, "O")


def test_no_winner_on_empty_board():
    cells = [EMPTY] * 9
    assert not has_winner(cells, "X")
    assert not has_winner(cells, "O")


def test_is_draw_only_counts_occupied_cells():
    assert not is_draw(_cells("XOXOXO..."))
    assert is_draw(_cells("XOXXOOOXX"))
    # A full board with a winning line still reads as full
    full_with_win = _cells("XXXOOXOXO")
    assert is_draw(full_with_win)
    assert has_winner(full_with_win, "X")


def test_other_player():
    assert other_player("X") == "O"
    assert other_player("O") == "X"


def test_validate_cells_rejects_malformed_boards():
    with pytest.raises(ValueError):
        validate_cells([EMPTY] * 8)
    with pytest.raises(ValueError):
        validate_cells(_cells("XO.....Z."))
    validate_cells(_cells("XO......."))


def test_board_place_rejects_occupied_and_out_of_range():
    board = Board()
    board.place("X", 4)
    with pytest.raises(ValueError):
        board.place("O", 4)
    with pytest.raises(ValueError):
        board.place("O", 9)


def test_trial_move_restores_cell_even_on_error():
    board = Board()
    with board.trial(3, "X"):
        assert board.cells[3] == "X"
    assert board.cells[3] == EMPTY

    with pytest.raises(RuntimeError):
        with board.trial(5, "O"):
            raise RuntimeError("boom")
    assert board.cells == [EMPTY] * 9


def test_play_move_alternates_players():
    game = TicTacToeGame()
    game.play_move(0)
    assert game.current_player == "O"
    game.play_move(4)
    assert game.current_player == "X"
    assert game.available_moves() == [1, 2, 3, 5, 6, 7, 8]


def test_game_detects_win_and_stops():
    game = TicTacToeGame()
    for idx in (0, 3, 1, 4, 2):
        game.play_move(idx)
    assert game.winner == "X"
    assert game.over
    assert game.available_moves() == []
    with pytest.raises(ValueError):
        game.play_move(8)


def test_game_detects_draw():
    game = TicTacToeGame()
    # X O X / X O O / O X X
    for idx in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        game.play_move(idx)
    assert game.winner is None
    assert game.drawn
    assert game.over


def test_reset_clears_the_board():
    game = TicTacToeGame()
    game.play_move(0)
    game.play_move(1)
    game.reset()
    assert game.board.cells == [EMPTY] * 9
    assert game.current_player == "X"
    assert not game.over
