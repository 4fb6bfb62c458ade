"""Unit tests for the win and terminal-condition detectors."""

from gamelobby.cards import Card
from gamelobby.detect import (
    Feedback,
    can_meld_out,
    check_connect,
    check_gomoku,
    check_tictactoe,
    collect_books,
    find_meld_partition,
    fleet_sunk,
    go_fish_finished,
    is_valid_run,
    is_valid_set,
    score_guess,
    short_seats,
)
from gamelobby.games.battleship import Ship
from gamelobby.games.grid import empty_board, put


def board_from(rows):
    return tuple(tuple(None if v == "." else v for v in row) for row in rows)


def test_tictactoe_row_win():
    board = board_from(["XXX", "OO.", "..."])
    result = check_tictactoe(board)
    assert result.winner == "X"
    assert result.winning_cells == ((0, 0), (0, 1), (0, 2))
    assert not result.is_draw


def test_tictactoe_anti_diagonal_win():
    board = board_from(["XXO", "XO.", "O.."])
    result = check_tictactoe(board)
    assert result.winner == "O"
    assert set(result.winning_cells) == {(0, 2), (1, 1), (2, 0)}


def test_tictactoe_full_board_is_draw():
    board = board_from(["XOX", "XOO", "OXX"])
    result = check_tictactoe(board)
    assert result.winner is None
    assert result.is_draw


def test_connect_vertical_through_last_move():
    board = empty_board(6, 7)
    for row in (2, 3, 4, 5):
        board = put(board, (row, 3), "X")
    result = check_connect(board, 4, last_move=(2, 3))
    assert result.winner == "X"
    assert result.winning_cells == ((2, 3), (3, 3), (4, 3), (5, 3))


def test_connect_three_is_not_four():
    board = empty_board(6, 7)
    for col in (0, 1, 2):
        board = put(board, (5, col), "O")
    assert check_connect(board, 4).winner is None
    assert check_connect(board, 3).winner == "O"


def test_gomoku_diagonal_five():
    board = empty_board(15, 15)
    for i in range(5):
        board = put(board, (3 + i, 4 + i), "X")
    result = check_gomoku(board, last_move=(5, 6))
    assert result.winner == "X"
    assert len(result.winning_cells) == 5


def test_score_guess_counts_exact_then_misplaced():
    feedback = score_guess(
        ["red", "blue", "green", "yellow"], ["blue", "red", "green", "purple"]
    )
    assert feedback == Feedback(correct=1, misplaced=2)


def test_score_guess_does_not_double_count_duplicates():
    feedback = score_guess(["red"] * 4, ["red", "blue", "blue", "blue"])
    assert feedback == Feedback(correct=1, misplaced=0)


def test_collect_books_removes_complete_rank():
    hand = [Card("7", suit) for suit in ("hearts", "diamonds", "clubs", "spades")]
    hand.append(Card("2", "spades"))
    kept, books = collect_books(hand)
    assert books == ("7",)
    assert kept == (Card("2", "spades"),)


def test_go_fish_finished_when_everything_is_empty():
    assert go_fish_finished([(), ()], (), [("2",), ("3",)])
    assert not go_fish_finished([(Card("2", "hearts"),), ()], (), [(), ()])


def test_fleet_sunk():
    afloat = Ship("Destroyer", 2, ((0, 0), (0, 1)), hits=1)
    sunk = Ship("Destroyer", 2, ((0, 0), (0, 1)), hits=2)
    assert not fleet_sunk([])
    assert not fleet_sunk([sunk, afloat])
    assert fleet_sunk([sunk])


def test_short_seats():
    assert short_seats([5, 2], 4) == (1,)
    assert short_seats([4, 4], 4) == ()


def test_sets_and_runs():
    assert is_valid_set([Card("9", "hearts"), Card("9", "clubs"), Card("9", "spades")])
    assert not is_valid_set([Card("9", "hearts"), Card("9", "hearts"), Card("9", "spades")])
    assert is_valid_run([Card("A", "hearts"), Card("2", "hearts"), Card("3", "hearts")])
    # Aces are low only.
    assert not is_valid_run([Card("Q", "hearts"), Card("K", "hearts"), Card("A", "hearts")])
    assert not is_valid_run([Card("4", "hearts"), Card("5", "clubs"), Card("6", "hearts")])


def test_partition_shares_rank_between_set_and_run():
    hand = [
        Card("5", "hearts"),
        Card("5", "diamonds"),
        Card("5", "clubs"),
        Card("5", "spades"),
        Card("6", "spades"),
        Card("7", "spades"),
    ]
    melds = find_meld_partition(hand)
    assert melds is not None
    assert sorted(m.kind for m in melds) == ["run", "set"]
    assert sum(len(m.cards) for m in melds) == len(hand)
    assert can_meld_out(hand)
    assert not can_meld_out(hand + [Card("K", "diamonds")])
    assert not can_meld_out([])
