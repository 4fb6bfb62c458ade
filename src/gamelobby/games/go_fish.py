"""Go Fish for two players."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence, Tuple
import random

from ..cards import RANKS, Card, shuffled_deck
from ..detect import collect_books, go_fish_finished
from .common import PlayerInfo, make_players, other, seat_of, with_seat

HAND_SIZE = 7

Hand = Tuple[Card, ...]


@dataclass(frozen=True)
class GoFishState:
    players: Tuple[PlayerInfo, PlayerInfo]
    deck: Tuple[Card, ...]
    hands: Tuple[Hand, Hand]
    books: Tuple[Tuple[str, ...], Tuple[str, ...]]
    current_turn: str
    last_action: str = ""
    game_over: bool = False
    winner: Optional[str] = None
    is_draw: bool = False

    def seat_name(self, seat: int) -> str:
        player = self.players[seat]
        return player.username or player.id


def init_go_fish(
    players: Sequence[PlayerInfo], rng: Optional[random.Random] = None
) -> GoFishState:
    seated = make_players(players)
    deck = shuffled_deck(rng)
    hand0, books0 = collect_books(deck[:HAND_SIZE])
    hand1, books1 = collect_books(deck[HAND_SIZE:2 * HAND_SIZE])
    state = GoFishState(
        players=seated,
        deck=tuple(deck[2 * HAND_SIZE:]),
        hands=(hand0, hand1),
        books=(books0, books1),
        current_turn=seated[0].id,
        last_action="Game started. Ask for a rank you hold.",
    )
    return _settle(state)


def _give(state: GoFishState, seat: int, cards: Sequence[Card]) -> Tuple[GoFishState, Tuple[str, ...]]:
    hand, new_books = collect_books(state.hands[seat] + tuple(cards))
    return (
        replace(
            state,
            hands=with_seat(state.hands, seat, hand),
            books=with_seat(state.books, seat, state.books[seat] + new_books),
        ),
        new_books,
    )


def _book_note(books: Sequence[str]) -> str:
    return f" Book of {', '.join(books)}!" if books else ""


def _settle(state: GoFishState) -> GoFishState:
    """Forced draws for empty hands, stuck turns, and the end of the game."""
    seats = (0, 1) if state.current_turn == state.players[0].id else (1, 0)
    for seat in seats:
        if not state.hands[seat] and state.deck:
            state = replace(
                state,
                deck=state.deck[1:],
                hands=with_seat(state.hands, seat, (state.deck[0],)),
            )

    if go_fish_finished(state.hands, state.deck, state.books):
        counts = [len(b) for b in state.books]
        winner = None
        if counts[0] != counts[1]:
            winner = state.players[0 if counts[0] > counts[1] else 1].id
        return replace(
            state, game_over=True, winner=winner, is_draw=winner is None
        )

    seat = seat_of(state.players, state.current_turn)
    if seat is not None and not state.hands[seat]:
        state = replace(
            state,
            current_turn=state.players[other(seat)].id,
            last_action=state.last_action + " No cards left, turn passes.",
        )
    return state


def apply_go_fish(state: GoFishState, move: Any, player_id: str) -> GoFishState:
    if state.game_over or state.current_turn != player_id or not isinstance(move, Mapping):
        return state
    seat = seat_of(state.players, player_id)
    rank = move.get("rank")
    if seat is None or rank not in RANKS:
        return state
    if not any(card.rank == rank for card in state.hands[seat]):
        return state

    target = other(seat)
    asker = state.seat_name(seat)
    taken = tuple(card for card in state.hands[target] if card.rank == rank)

    if taken:
        state = replace(
            state,
            hands=with_seat(
                state.hands,
                target,
                tuple(card for card in state.hands[target] if card.rank != rank),
            ),
        )
        state, books = _give(state, seat, taken)
        note = f"{asker} took {len(taken)} {rank}(s).{_book_note(books)}"
        return _settle(replace(state, last_action=note))

    if not state.deck:
        return _settle(
            replace(
                state,
                current_turn=state.players[target].id,
                last_action=f"Go Fish! The deck is empty, {asker}'s turn passes.",
            )
        )

    drawn = state.deck[0]
    state, books = _give(replace(state, deck=state.deck[1:]), seat, (drawn,))
    if drawn.rank == rank:
        note = f"Go Fish! {asker} drew the {rank} and goes again."
        next_turn = player_id
    else:
        note = f"Go Fish! {asker} drew from the deck."
        next_turn = state.players[target].id
    return _settle(
        replace(state, current_turn=next_turn, last_action=note + _book_note(books))
    )
