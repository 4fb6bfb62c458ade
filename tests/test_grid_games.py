"""Tests for the Tic-Tac-Toe, Connect-N and Gomoku state machines."""

from gamelobby.games.common import PlayerInfo
from gamelobby.games.grid import (
    apply_connect,
    apply_gomoku,
    apply_tictactoe,
    init_connect,
    init_gomoku,
    init_tictactoe,
)

PLAYERS = (PlayerInfo("alice", "Alice"), PlayerInfo("bob", "Bob"))


def play(apply, state, moves, now=1.0):
    for player_id, move in moves:
        state = apply(state, move, player_id, now=now)
    return state


def test_tictactoe_initial_state():
    state = init_tictactoe(PLAYERS)
    assert state.rows == state.cols == 3
    assert state.current_player == "alice"
    assert [p.symbol for p in state.players] == ["X", "O"]


def test_tictactoe_top_row_win():
    state = play(
        apply_tictactoe,
        init_tictactoe(PLAYERS),
        [
            ("alice", {"row": 0, "col": 0}),
            ("bob", {"row": 1, "col": 0}),
            ("alice", {"row": 0, "col": 1}),
            ("bob", {"row": 1, "col": 1}),
            ("alice", {"row": 0, "col": 2}),
        ],
    )
    assert state.winner == "alice"
    assert state.winning_cells == ((0, 0), (0, 1), (0, 2))
    assert len(state.move_history) == 5
    assert state.move_history[-1].move == {"row": 0, "col": 2}
    assert state.move_history[-1].timestamp == 1.0
    # Nothing moves once the game is over.
    assert apply_tictactoe(state, {"row": 2, "col": 2}, "bob") is state


def test_tictactoe_rejections_return_same_state():
    state = init_tictactoe(PLAYERS)
    assert apply_tictactoe(state, {"row": 0, "col": 0}, "bob") is state
    assert apply_tictactoe(state, {"row": 3, "col": 0}, "alice") is state
    assert apply_tictactoe(state, {"row": True, "col": 0}, "alice") is state
    assert apply_tictactoe(state, "center", "alice") is state

    moved = apply_tictactoe(state, [1, 1], "alice")
    assert moved.board[1][1] == "X"
    assert apply_tictactoe(moved, {"row": 1, "col": 1}, "bob") is moved


def test_tictactoe_draw():
    state = play(
        apply_tictactoe,
        init_tictactoe(PLAYERS),
        [
            ("alice", {"row": 0, "col": 0}),
            ("bob", {"row": 0, "col": 1}),
            ("alice", {"row": 0, "col": 2}),
            ("bob", {"row": 1, "col": 1}),
            ("alice", {"row": 1, "col": 0}),
            ("bob", {"row": 1, "col": 2}),
            ("alice", {"row": 2, "col": 1}),
            ("bob", {"row": 2, "col": 0}),
            ("alice", {"row": 2, "col": 2}),
        ],
    )
    assert state.is_draw
    assert state.winner is None


def test_connect_disc_drops_to_lowest_row():
    state = init_connect(PLAYERS, n=4)
    assert (state.rows, state.cols) == (6, 7)
    state = apply_connect(state, {"col": 3}, "alice", now=0.0)
    assert state.board[5][3] == "X"
    assert state.last_move == (5, 3)
    state = apply_connect(state, {"col": 3}, "bob", now=0.0)
    assert state.board[4][3] == "O"


def test_connect_full_column_is_rejected():
    state = init_connect(PLAYERS, n=4)
    for i in range(6):
        state = apply_connect(state, {"col": 0}, ("alice", "bob")[i % 2])
    assert all(state.board[row][0] is not None for row in range(6))
    assert apply_connect(state, {"col": 0}, "alice") is state
    assert apply_connect(state, {"col": 7}, "alice") is state


def test_connect_vertical_win():
    moves = []
    for _ in range(3):
        moves += [("alice", {"col": 0}), ("bob", {"col": 1})]
    moves.append(("alice", {"col": 0}))
    state = play(apply_connect, init_connect(PLAYERS, n=4), moves)
    assert state.winner == "alice"
    assert state.winning_cells == ((2, 0), (3, 0), (4, 0), (5, 0))


def test_connect_three_board():
    state = init_connect(PLAYERS, n=3)
    assert (state.rows, state.cols, state.win_length) == (4, 5, 3)
    state = play(
        apply_connect,
        state,
        [
            ("alice", {"col": 0}),
            ("bob", {"col": 4}),
            ("alice", {"col": 1}),
            ("bob", {"col": 4}),
            ("alice", {"col": 2}),
        ],
    )
    assert state.winner == "alice"


def test_gomoku_five_in_a_row():
    moves = []
    for i in range(4):
        moves += [("alice", {"row": 7, "col": 3 + i}), ("bob", {"row": 0, "col": i})]
    state = play(apply_gomoku, init_gomoku(PLAYERS), moves)
    assert state.winner is None
    state = apply_gomoku(state, {"row": 7, "col": 7}, "alice")
    assert state.winner == "alice"
    assert state.winning_cells == tuple((7, c) for c in range(3, 8))
