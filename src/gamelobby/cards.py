"""Standard 52-card deck shared by Go Fish, War and Rummy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import random

SUITS: Tuple[str, ...] = ("hearts", "diamonds", "clubs", "spades")
RANKS: Tuple[str, ...] = (
    "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A",
)
DECK_SIZE = len(SUITS) * len(RANKS)

# War compares with aces high, Rummy builds runs with aces low.
ACE_HIGH: Dict[str, int] = {rank: i + 2 for i, rank in enumerate(RANKS)}
ACE_LOW: Dict[str, int] = {rank: (1 if rank == "A" else ACE_HIGH[rank]) for rank in RANKS}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    @property
    def id(self) -> str:
        return f"{self.rank}-{self.suit}"

    def __str__(self) -> str:
        return self.id


def standard_deck() -> List[Card]:
    """Unshuffled deck, suit-major."""
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    deck = standard_deck()
    (rng or random.Random()).shuffle(deck)
    return deck


def shuffled(cards: Sequence[Card], rng: random.Random) -> Tuple[Card, ...]:
    out = list(cards)
    rng.shuffle(out)
    return tuple(out)


def new_seed(rng: Optional[random.Random] = None) -> int:
    return (rng or random.Random()).getrandbits(32)


def seeded_rng(seed: int, step: int) -> random.Random:
    """Generator for one transition of a game that stores its own seed.

    Keeping the seed in the state makes a shuffling transition a pure
    function of (state, move).
    """
    return random.Random(f"{seed}:{step}")


def find_card(cards: Sequence[Card], card_id: str) -> Optional[Card]:
    for card in cards:
        if card.id == card_id:
            return card
    return None
