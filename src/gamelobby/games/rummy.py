"""Two-player Rummy: draw, discard, and go out by melding the whole hand."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple
import random

from ..cards import ACE_LOW, SUITS, Card, find_card, new_seed, seeded_rng, shuffled, shuffled_deck
from ..detect import Meld, find_meld_partition
from .common import PlayerInfo, make_players, other, seat_of, with_seat

HAND_SIZE = 13

Hand = Tuple[Card, ...]


@dataclass(frozen=True)
class RummyState:
    players: Tuple[PlayerInfo, PlayerInfo]
    deck: Tuple[Card, ...]
    discard_pile: Tuple[Card, ...]  # last card is the top
    hands: Tuple[Hand, Hand]
    current_turn: str
    turn_phase: str = "draw"  # draw, discard
    melds: Tuple[Tuple[Meld, ...], Tuple[Meld, ...]] = ((), ())
    phase: str = "playing"  # playing, finished
    last_action: str = ""
    winner: Optional[str] = None
    is_draw: bool = False
    reshuffles: int = 0
    seed: int = 0

    @property
    def finished(self) -> bool:
        return self.phase == "finished"

    @property
    def top_discard(self) -> Optional[Card]:
        return self.discard_pile[-1] if self.discard_pile else None


class DeclareOutcome(NamedTuple):
    state: RummyState
    valid: bool
    melds: Tuple[Meld, ...] = ()


def sort_hand(cards: Sequence[Card]) -> Hand:
    return tuple(sorted(cards, key=lambda c: (SUITS.index(c.suit), ACE_LOW[c.rank])))


def init_rummy(players: Sequence[PlayerInfo], rng: Optional[random.Random] = None) -> RummyState:
    rng = rng or random.Random()
    seated = make_players(players)
    deck = shuffled_deck(rng)
    dealt = 2 * HAND_SIZE
    return RummyState(
        players=seated,
        deck=tuple(deck[dealt + 1:]),
        discard_pile=(deck[dealt],),
        hands=(sort_hand(deck[:HAND_SIZE]), sort_hand(deck[HAND_SIZE:dealt])),
        current_turn=seated[0].id,
        last_action="Draw from the deck or the discard pile.",
        seed=new_seed(rng),
    )


def _name(state: RummyState, seat: int) -> str:
    player = state.players[seat]
    return player.username or player.id


def _draw(state: RummyState, seat: int, source: Any) -> RummyState:
    if source == "discard":
        card = state.top_discard
        if card is None:
            return state
        pile = state.discard_pile[:-1]
        deck = state.deck
    elif source == "deck":
        if not state.deck:
            if len(state.discard_pile) <= 1:
                return replace(
                    state,
                    phase="finished",
                    is_draw=True,
                    last_action="Deck empty! The game is a draw.",
                )
            # Everything but the top discard goes back into the deck.
            rng = seeded_rng(state.seed, state.reshuffles)
            state = replace(
                state,
                deck=shuffled(state.discard_pile[:-1], rng),
                discard_pile=state.discard_pile[-1:],
                reshuffles=state.reshuffles + 1,
            )
        card = state.deck[0]
        deck = state.deck[1:]
        pile = state.discard_pile
    else:
        return state

    where = "the discard pile" if source == "discard" else "the deck"
    return replace(
        state,
        deck=deck,
        discard_pile=pile,
        hands=with_seat(state.hands, seat, sort_hand(state.hands[seat] + (card,))),
        turn_phase="discard",
        last_action=f"{_name(state, seat)} drew from {where}.",
    )


def _discard(state: RummyState, seat: int, card_id: Any) -> RummyState:
    card = find_card(state.hands[seat], card_id) if isinstance(card_id, str) else None
    if card is None:
        return state
    return replace(
        state,
        hands=with_seat(state.hands, seat, tuple(c for c in state.hands[seat] if c != card)),
        discard_pile=state.discard_pile + (card,),
        current_turn=state.players[other(seat)].id,
        turn_phase="draw",
        last_action=f"{_name(state, seat)} discarded {card}.",
    )


def declare_rummy(
    state: RummyState, player_id: str, card_id: Optional[str] = None
) -> DeclareOutcome:
    """Go out by melding the whole hand, optionally discarding ``card_id`` first."""
    seat = seat_of(state.players, player_id)
    if (
        seat is None
        or state.finished
        or state.current_turn != player_id
        or state.turn_phase != "discard"
    ):
        return DeclareOutcome(state, False)

    hand = state.hands[seat]
    pile = state.discard_pile
    if card_id is not None:
        card = find_card(hand, card_id)
        if card is None:
            return DeclareOutcome(state, False)
        hand = tuple(c for c in hand if c != card)
        pile = pile + (card,)

    melds = find_meld_partition(hand) if hand else None
    if melds is None:
        return DeclareOutcome(state, False)
    declared = replace(
        state,
        hands=with_seat(state.hands, seat, ()),
        discard_pile=pile,
        melds=with_seat(state.melds, seat, melds),
        phase="finished",
        winner=player_id,
        last_action=f"{_name(state, seat)} declared and won!",
    )
    return DeclareOutcome(declared, True, melds)


def apply_rummy(state: RummyState, move: Any, player_id: str) -> RummyState:
    if state.finished or not isinstance(move, Mapping):
        return state
    seat = seat_of(state.players, player_id)
    if seat is None or state.current_turn != player_id:
        return state

    action = move.get("action")
    if action == "draw" and state.turn_phase == "draw":
        return _draw(state, seat, move.get("source"))
    if action == "discard" and state.turn_phase == "discard":
        return _discard(state, seat, move.get("card_id"))
    if action == "declare":
        card_id = move.get("card_id")
        if card_id is not None and not isinstance(card_id, str):
            return state
        return declare_rummy(state, player_id, card_id).state
    return state
