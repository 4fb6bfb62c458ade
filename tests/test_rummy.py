"""Tests for two-player Rummy."""

import random
from dataclasses import replace

import pytest

from gamelobby.ai import rummy_move
from gamelobby.cards import DECK_SIZE, Card
from gamelobby.games.common import PlayerInfo
from gamelobby.games.rummy import (
    HAND_SIZE,
    RummyState,
    apply_rummy,
    declare_rummy,
    init_rummy,
    sort_hand,
)

PLAYERS = (PlayerInfo("alice", "Alice"), PlayerInfo("bob", "Bob"))

MELDED = (
    Card("7", "hearts"),
    Card("7", "diamonds"),
    Card("7", "clubs"),
    Card("2", "spades"),
    Card("3", "spades"),
    Card("4", "spades"),
    Card("5", "spades"),
)


def make_state(hand, turn_phase="discard", deck=(Card("K", "diamonds"),), discard=(Card("9", "clubs"),)):
    return RummyState(
        players=PLAYERS,
        deck=tuple(deck),
        discard_pile=tuple(discard),
        hands=(sort_hand(hand), (Card("Q", "clubs"), Card("J", "hearts"))),
        current_turn="alice",
        turn_phase=turn_phase,
        seed=4,
    )


def test_deal():
    state = init_rummy(PLAYERS, rng=random.Random(2))
    assert [len(h) for h in state.hands] == [HAND_SIZE, HAND_SIZE]
    assert len(state.discard_pile) == 1
    assert len(state.deck) + 2 * HAND_SIZE + 1 == DECK_SIZE
    assert state.turn_phase == "draw"


def test_draw_then_discard():
    state = make_state(MELDED[:3], turn_phase="draw")
    drawn = apply_rummy(state, {"action": "draw", "source": "deck"}, "alice")
    assert Card("K", "diamonds") in drawn.hands[0]
    assert drawn.turn_phase == "discard"
    assert apply_rummy(drawn, {"action": "draw", "source": "deck"}, "alice") is drawn

    discarded = apply_rummy(drawn, {"action": "discard", "card_id": "K-diamonds"}, "alice")
    assert discarded.top_discard == Card("K", "diamonds")
    assert discarded.current_turn == "bob"
    assert discarded.turn_phase == "draw"


def test_draw_from_discard_pile():
    state = make_state(MELDED[:3], turn_phase="draw")
    drawn = apply_rummy(state, {"action": "draw", "source": "discard"}, "alice")
    assert Card("9", "clubs") in drawn.hands[0]
    assert drawn.discard_pile == ()


def test_out_of_phase_and_out_of_turn_are_rejected():
    state = make_state(MELDED[:3], turn_phase="draw")
    assert apply_rummy(state, {"action": "discard", "card_id": "7-hearts"}, "alice") is state
    assert apply_rummy(state, {"action": "draw", "source": "deck"}, "bob") is state
    assert apply_rummy(state, {"action": "draw", "source": "floor"}, "alice") is state


def test_empty_deck_reshuffles_discards():
    discard = (Card("2", "hearts"), Card("3", "hearts"), Card("4", "clubs"))
    state = make_state(MELDED[:3], turn_phase="draw", deck=(), discard=discard)
    drawn = apply_rummy(state, {"action": "draw", "source": "deck"}, "alice")
    assert drawn.reshuffles == 1
    assert drawn.discard_pile == (Card("4", "clubs"),)
    assert len(drawn.deck) == 1
    assert len(drawn.hands[0]) == 4


def test_nothing_left_to_draw_is_a_draw():
    state = make_state(MELDED[:3], turn_phase="draw", deck=())
    after = apply_rummy(state, {"action": "draw", "source": "deck"}, "alice")
    assert after.is_draw
    assert after.finished


def test_declare_with_a_melded_hand():
    outcome = declare_rummy(make_state(MELDED), "alice")
    assert outcome.valid
    assert outcome.state.winner == "alice"
    assert outcome.state.hands[0] == ()
    assert sum(len(m.cards) for m in outcome.melds) == len(MELDED)


def test_declare_discarding_the_extra_card():
    state = make_state(MELDED + (Card("K", "hearts"),))
    assert not declare_rummy(state, "alice").valid
    outcome = declare_rummy(state, "alice", "K-hearts")
    assert outcome.valid
    assert outcome.state.top_discard == Card("K", "hearts")


def test_invalid_declare_is_rejected():
    state = make_state((Card("7", "hearts"), Card("7", "diamonds"), Card("K", "spades")))
    assert apply_rummy(state, {"action": "declare"}, "alice") is state
    early = make_state(MELDED, turn_phase="draw")
    assert not declare_rummy(early, "alice").valid
    assert apply_rummy(make_state(MELDED), {"action": "declare"}, "alice").winner == "alice"


def card_total(state):
    melded = sum(len(meld.cards) for side in state.melds for meld in side)
    return len(state.deck) + len(state.discard_pile) + sum(map(len, state.hands)) + melded


@pytest.mark.parametrize("difficulty", ["easy", "medium"])
def test_cards_are_conserved_through_play(difficulty):
    state = init_rummy(PLAYERS, rng=random.Random(8))
    # Everything undealt sits in the discard pile, so the first deck draw reshuffles.
    state = replace(state, deck=(), discard_pile=state.deck + state.discard_pile)
    rng = random.Random(8)
    for _ in range(300):
        if state.finished:
            break
        after = apply_rummy(state, rummy_move(state, difficulty, rng), state.current_turn)
        assert after is not state
        state = after
        assert card_total(state) == DECK_SIZE
    assert state.reshuffles >= 1
