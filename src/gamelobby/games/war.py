"""War: one call plays a full battle, including any chain of wars."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple
import random

from ..cards import ACE_HIGH, Card, new_seed, seeded_rng, shuffled, shuffled_deck
from ..detect import short_seats
from .common import PlayerInfo, make_players, other, seat_of

WAR_HIDDEN = 3  # face-down cards committed per side on a tie

Deck = Tuple[Card, ...]


@dataclass(frozen=True)
class Battle:
    reveals: Tuple[Tuple[Card, Card], ...]  # face-up pairs, seat 0 first
    winner: Optional[str]
    war_depth: int = 0


@dataclass(frozen=True)
class WarState:
    players: Tuple[PlayerInfo, PlayerInfo]
    decks: Tuple[Deck, Deck]
    pile: Deck = ()
    phase: str = "playing"  # playing, finished
    is_war: bool = False
    war_depth: int = 0
    last_battle: Optional[Battle] = None
    last_action: str = ""
    rounds: int = 0
    winner: Optional[str] = None
    is_draw: bool = False
    seed: int = 0

    @property
    def finished(self) -> bool:
        return self.phase == "finished"


def init_war(players: Sequence[PlayerInfo], rng: Optional[random.Random] = None) -> WarState:
    rng = rng or random.Random()
    deck = shuffled_deck(rng)
    half = len(deck) // 2
    return WarState(
        players=make_players(players),
        decks=(tuple(deck[:half]), tuple(deck[half:])),
        last_action="Play a round to flip the top cards.",
        seed=new_seed(rng),
    )


def _name(state: WarState, seat: int) -> str:
    player = state.players[seat]
    return player.username or player.id


def _finish(state: WarState, loser: Optional[int], note: str) -> WarState:
    if loser is None:
        return replace(state, phase="finished", is_draw=True, last_action=note)
    return replace(
        state,
        phase="finished",
        winner=state.players[other(loser)].id,
        last_action=note,
    )


def _short_loser(decks: Sequence[Deck], needed: int) -> Tuple[bool, Optional[int]]:
    """(someone is short, seat that loses or None for a draw)."""
    short = short_seats([len(d) for d in decks], needed)
    if not short:
        return False, None
    if len(short) == 1:
        return True, short[0]
    if len(decks[0]) == len(decks[1]):
        return True, None
    return True, 0 if len(decks[0]) < len(decks[1]) else 1


def apply_war(state: WarState, move: Any, player_id: str) -> WarState:
    if state.finished or not isinstance(move, Mapping) or move.get("action") != "play":
        return state
    if seat_of(state.players, player_id) is None:
        return state

    empty, loser = _short_loser(state.decks, 1)
    if empty:
        return _finish(state, loser, "A deck ran out of cards.")

    decks: List[Deck] = list(state.decks)
    pile: List[Card] = list(state.pile)
    reveals: List[Tuple[Card, Card]] = []
    depth = 0
    while True:
        up = (decks[0][0], decks[1][0])
        decks = [decks[0][1:], decks[1][1:]]
        pile.extend(up)
        reveals.append(up)
        a, b = ACE_HIGH[up[0].rank], ACE_HIGH[up[1].rank]
        if a != b:
            break

        short, loser = _short_loser(decks, WAR_HIDDEN + 1)
        if short:
            # The revealed cards stay in the pile; the game is over.
            battle = Battle(
                tuple(reveals),
                None if loser is None else state.players[other(loser)].id,
                depth + 1,
            )
            ended = replace(
                state,
                decks=(decks[0], decks[1]),
                pile=tuple(pile),
                is_war=True,
                war_depth=depth + 1,
                last_battle=battle,
                rounds=state.rounds + 1,
            )
            who = "Both sides" if loser is None else _name(state, loser)
            return _finish(ended, loser, f"WAR! {who} cannot fund the war.")

        pile.extend(decks[0][:WAR_HIDDEN] + decks[1][:WAR_HIDDEN])
        decks = [decks[0][WAR_HIDDEN:], decks[1][WAR_HIDDEN:]]
        depth += 1

    won = 0 if a > b else 1
    rng = seeded_rng(state.seed, state.rounds)
    decks[won] = decks[won] + shuffled(pile, rng)
    winner_card, loser_card = up[won], up[other(won)]
    note = (
        f"{_name(state, won)}'s {winner_card.rank} beats {loser_card.rank} "
        f"and takes {len(pile)} cards."
    )
    if depth:
        note = f"WAR x{depth}! " + note
    next_state = replace(
        state,
        decks=(decks[0], decks[1]),
        pile=(),
        is_war=depth > 0,
        war_depth=depth,
        last_battle=Battle(tuple(reveals), state.players[won].id, depth),
        last_action=note,
        rounds=state.rounds + 1,
    )
    if not decks[other(won)]:
        return _finish(next_state, other(won), note + " The other deck is empty.")
    return next_state
