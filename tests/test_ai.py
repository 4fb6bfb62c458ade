"""Tests for the AI move generators."""

import random
from dataclasses import replace

from gamelobby.ai import (
    MinimaxAI,
    battleship_move,
    chess_move,
    connect_move,
    go_fish_move,
    gomoku_move,
    rummy_move,
    secret_code_move,
    tictactoe_move,
    war_move,
)
from gamelobby.cards import Card
from gamelobby.detect import score_guess
from gamelobby.games.battleship import HIT, SHIP, BattleshipState, Ship, empty_waters, init_battleship, mark
from gamelobby.games.chess import Piece, init_chess
from gamelobby.games.common import PlayerInfo
from gamelobby.games.go_fish import GoFishState
from gamelobby.games.grid import (
    apply_connect,
    apply_gomoku,
    apply_tictactoe,
    empty_board,
    init_connect,
    init_gomoku,
    init_tictactoe,
)
from gamelobby.games.rummy import RummyState
from gamelobby.games.secret_code import Guess, init_secret_code
from gamelobby.games.war import init_war

PLAYERS = (PlayerInfo("alice"), PlayerInfo("bob"))


def play(apply, state, cells):
    for i, cell in enumerate(cells):
        move = {"col": cell} if isinstance(cell, int) else {"row": cell[0], "col": cell[1]}
        state = apply(state, move, ("alice", "bob")[i % 2])
    return state


def test_tictactoe_takes_immediate_win():
    state = play(apply_tictactoe, init_tictactoe(PLAYERS), [(0, 0), (1, 0), (0, 1), (1, 1)])
    for difficulty in ("medium", "hard"):
        assert tictactoe_move(state, difficulty, random.Random(0)) == {"row": 0, "col": 2}


def test_tictactoe_blocks_opponent():
    state = play(apply_tictactoe, init_tictactoe(PLAYERS), [(0, 0), (2, 2), (0, 1)])
    assert state.current_player == "bob"
    assert tictactoe_move(state, "medium", random.Random(0)) == {"row": 0, "col": 2}
    assert tictactoe_move(state, "hard", random.Random(0)) == {"row": 0, "col": 2}


def test_tictactoe_easy_plays_an_empty_cell():
    state = play(apply_tictactoe, init_tictactoe(PLAYERS), [(0, 0), (1, 1)])
    move = tictactoe_move(state, "easy", random.Random(3))
    assert state.board[move["row"]][move["col"]] is None


def test_minimax_finds_a_move_on_an_empty_board():
    ai = MinimaxAI(me="X", opp="O", win_length=3)
    cell = ai.choose(empty_board(3, 3))
    assert cell is not None


def test_connect_blocks_vertical_threat():
    state = play(apply_connect, init_connect(PLAYERS, n=4), [0, 1, 0, 1, 0])
    assert state.current_player == "bob"
    assert connect_move(state, "medium", random.Random(0)) == {"col": 0}
    assert connect_move(state, "hard", random.Random(0)) == {"col": 0}


def test_connect_easy_avoids_full_columns():
    state = play(apply_connect, init_connect(PLAYERS, n=3), [0, 0, 0, 0])
    for seed in range(10):
        assert connect_move(state, "easy", random.Random(seed))["col"] != 0


def test_gomoku_opens_in_the_centre():
    state = init_gomoku(PLAYERS)
    assert gomoku_move(state, "hard", random.Random(0)) == {"row": 7, "col": 7}


def test_gomoku_hard_completes_five():
    cells = []
    for i in range(4):
        cells += [(7, 3 + i), (0, i)]
    state = play(apply_gomoku, init_gomoku(PLAYERS), cells)
    move = gomoku_move(state, "hard", random.Random(0))
    assert (move["row"], move["col"]) in {(7, 2), (7, 7)}


def test_chess_prefers_the_biggest_capture():
    rows = [[None] * 8 for _ in range(8)]
    rows[7][0] = Piece("r", "w")
    rows[7][7] = Piece("k", "w")
    rows[3][0] = Piece("q", "b")
    rows[6][1] = Piece("p", "b")
    rows[0][7] = Piece("k", "b")
    state = replace(init_chess(PLAYERS), board=tuple(tuple(r) for r in rows))
    assert chess_move(state, "medium", random.Random(0)) == {"from": [7, 0], "to": [3, 0]}


def test_chess_easy_plays_a_legal_move():
    state = init_chess(PLAYERS)
    move = chess_move(state, "easy", random.Random(1))
    assert move["from"][0] in (6, 7)


def test_battleship_places_randomly_then_hunts():
    state = init_battleship(PLAYERS, rng=random.Random(0))
    assert battleship_move(state, "hard", random.Random(0), player_id="bob") == {"random": True}

    ship = Ship("Destroyer", 2, ((5, 5), (5, 6)), hits=1)
    bob_board = mark(mark(empty_waters(), ship.positions, SHIP), [(5, 5)], HIT)
    playing = BattleshipState(
        players=PLAYERS,
        boards=(empty_waters(), bob_board),
        fleets=((), (ship,)),
        phase="playing",
        placing_ship=(5, 5),
        current_turn="alice",
    )
    move = battleship_move(playing, "medium", random.Random(0))
    assert (move["row"], move["col"]) in {(5, 4), (5, 6), (4, 5), (6, 5)}


def test_battleship_hard_fires_on_parity():
    state = BattleshipState(
        players=PLAYERS,
        boards=(empty_waters(), empty_waters()),
        phase="playing",
        placing_ship=(5, 5),
        current_turn="alice",
    )
    for seed in range(5):
        move = battleship_move(state, "hard", random.Random(seed))
        assert (move["row"] + move["col"]) % 2 == 0


def test_go_fish_asks_for_most_held_rank():
    state = GoFishState(
        players=PLAYERS,
        deck=(),
        hands=(
            (Card("7", "hearts"), Card("7", "clubs"), Card("2", "spades")),
            (Card("3", "hearts"),),
        ),
        books=((), ()),
        current_turn="alice",
    )
    assert go_fish_move(state, "medium", random.Random(0)) == {"rank": "7"}
    assert go_fish_move(state, "easy", random.Random(0))["rank"] in {"7", "2"}


def test_war_always_plays():
    state = init_war(PLAYERS, rng=random.Random(0))
    assert war_move(state) == {"action": "play"}


def test_rummy_draws_then_declares():
    melded = (
        Card("7", "hearts"),
        Card("7", "diamonds"),
        Card("7", "clubs"),
        Card("2", "spades"),
        Card("3", "spades"),
        Card("4", "spades"),
    )
    state = RummyState(
        players=PLAYERS,
        deck=(Card("K", "diamonds"),),
        discard_pile=(Card("9", "clubs"),),
        hands=(melded, ()),
        current_turn="alice",
    )
    assert rummy_move(state, "medium") == {"action": "draw", "source": "deck"}

    ready = replace(state, turn_phase="discard")
    assert rummy_move(ready, "medium") == {"action": "declare"}

    extra = replace(ready, hands=(melded + (Card("K", "hearts"),), ()))
    assert rummy_move(extra, "medium") == {"action": "declare", "card_id": "K-hearts"}


def test_rummy_discards_deadwood():
    hand = (
        Card("7", "hearts"),
        Card("7", "diamonds"),
        Card("7", "clubs"),
        Card("Q", "spades"),
        Card("3", "hearts"),
    )
    state = RummyState(
        players=PLAYERS,
        deck=(),
        discard_pile=(),
        hands=(hand, ()),
        current_turn="alice",
        turn_phase="discard",
    )
    assert rummy_move(state, "medium") == {"action": "discard", "card_id": "Q-spades"}


def test_secret_code_sets_secret_during_setup():
    state = init_secret_code(PLAYERS)
    move = secret_code_move(state, "medium", random.Random(0), player_id="bob")
    assert move["action"] == "set_secret"
    assert len(move["code"]) == 4


def test_secret_code_hard_guess_is_consistent():
    state = init_secret_code(PLAYERS)
    secret = ("blue", "green", "red", "yellow")
    probe = ("red", "red", "blue", "blue")
    feedback = score_guess(probe, secret)
    state = replace(
        state,
        secrets=(("red",) * 4, secret),
        phase="playing",
        current_player="alice",
        guesses=(Guess("alice", probe, feedback.correct, feedback.misplaced),),
    )
    move = secret_code_move(state, "hard", random.Random(0))
    assert move["action"] == "guess"
    assert score_guess(probe, tuple(move["code"])) == feedback
