"""Go Fish, War and Rummy opponents. These games are shallow, so play is mostly random."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional
import random

from ..cards import ACE_LOW, Card
from ..detect import can_meld_out, candidate_melds, find_meld_partition
from ..games.common import seat_of
from ..games.go_fish import GoFishState
from ..games.rummy import RummyState
from ..games.war import WarState

Move = Dict[str, Any]


# ---------- Go Fish ----------


def go_fish_move(
    state: GoFishState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Move]:
    rng = rng or random.Random()
    seat = seat_of(state.players, state.current_turn)
    if state.game_over or seat is None or not state.hands[seat]:
        return None
    counts = Counter(card.rank for card in state.hands[seat])
    ranks = sorted(counts)
    if difficulty == "easy":
        return {"rank": rng.choice(ranks)}
    most = max(counts.values())
    return {"rank": rng.choice([rank for rank in ranks if counts[rank] == most])}


# ---------- War ----------


def war_move(
    state: WarState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Move]:
    if state.finished:
        return None
    return {"action": "play"}


# ---------- Rummy ----------


def _in_a_meld(hand: List[Card]) -> set:
    return {card for meld in candidate_melds(hand) for card in meld.cards}


def _draw_source(state: RummyState, hand: List[Card], difficulty: str) -> str:
    top = state.top_discard
    if difficulty == "hard" and top is not None:
        if any(top in meld.cards for meld in candidate_melds(hand + [top])):
            return "discard"
    return "deck"


def rummy_move(
    state: RummyState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Move]:
    rng = rng or random.Random()
    seat = seat_of(state.players, state.current_turn)
    if state.finished or seat is None:
        return None
    hand = list(state.hands[seat])

    if state.turn_phase == "draw":
        return {"action": "draw", "source": _draw_source(state, hand, difficulty)}

    if not hand:
        return None
    if can_meld_out(hand):
        return {"action": "declare"}
    if difficulty != "easy":
        for card in hand:
            rest = [c for c in hand if c != card]
            if find_meld_partition(rest) is not None:
                return {"action": "declare", "card_id": card.id}

    if difficulty == "easy":
        return {"action": "discard", "card_id": rng.choice(hand).id}
    melded = _in_a_meld(hand)
    deadwood = [card for card in hand if card not in melded] or hand
    high = max(ACE_LOW[card.rank] for card in deadwood)
    choice = rng.choice([card for card in deadwood if ACE_LOW[card.rank] == high])
    return {"action": "discard", "card_id": choice.id}
