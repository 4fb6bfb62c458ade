"""Win and terminal-condition detectors for every game in the lobby.

Everything here is a pure function over boards, hands or fleets; the
per-game state machines call into these after applying a move.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from itertools import combinations
from typing import (
    Dict,
    FrozenSet,
    Iterable,
    List,
    Literal,
    Optional,
    Sequence,
    Tuple,
)

from .cards import ACE_LOW, RANKS, SUITS, Card

Cell = Tuple[int, int]
Board = Tuple[Tuple[Optional[str], ...], ...]

# Right, down, down-right, down-left. Scanning forward from every occupied
# cell in these four directions visits every line exactly once.
DIRECTIONS: Tuple[Cell, ...] = ((0, 1), (1, 0), (1, 1), (1, -1))

TICTACTOE_LENGTH = 3
GOMOKU_LENGTH = 5
BOOK_SIZE = 4
TOTAL_BOOKS = len(RANKS)


# ---------- Grid games ----------


@dataclass(frozen=True)
class WinResult:
    winner: Optional[str] = None  # symbol, not player id
    is_draw: bool = False
    winning_cells: Tuple[Cell, ...] = ()


def _inside(board: Board, row: int, col: int) -> bool:
    return 0 <= row < len(board) and 0 <= col < len(board[0])


def is_full(board: Board) -> bool:
    return all(cell is not None for line in board for cell in line)


def find_line(board: Board, n: int) -> WinResult:
    """Full scan: any run of ``n`` equal marks wins, a full board draws."""
    for row, line in enumerate(board):
        for col, mark in enumerate(line):
            if mark is None:
                continue
            for dr, dc in DIRECTIONS:
                cells = [(row, col)]
                for k in range(1, n):
                    r, c = row + dr * k, col + dc * k
                    if not _inside(board, r, c) or board[r][c] != mark:
                        break
                    cells.append((r, c))
                if len(cells) >= n:
                    return WinResult(winner=mark, winning_cells=tuple(cells))
    return WinResult(is_draw=is_full(board))


def line_through(board: Board, cell: Cell, n: int) -> WinResult:
    """Check only the lines passing through ``cell`` (the last placed mark)."""
    row, col = cell
    mark = board[row][col]
    if mark is None:
        return WinResult()
    for dr, dc in DIRECTIONS:
        back: List[Cell] = []
        r, c = row - dr, col - dc
        while _inside(board, r, c) and board[r][c] == mark:
            back.append((r, c))
            r, c = r - dr, c - dc
        forward: List[Cell] = []
        r, c = row + dr, col + dc
        while _inside(board, r, c) and board[r][c] == mark:
            forward.append((r, c))
            r, c = r + dr, c + dc
        run = list(reversed(back)) + [cell] + forward
        if len(run) >= n:
            return WinResult(winner=mark, winning_cells=tuple(run))
    return WinResult(is_draw=is_full(board))


def check_tictactoe(board: Board) -> WinResult:
    return find_line(board, TICTACTOE_LENGTH)


def check_connect(board: Board, n: int, last_move: Optional[Cell] = None) -> WinResult:
    if last_move is not None:
        return line_through(board, last_move, n)
    return find_line(board, n)


def check_gomoku(board: Board, last_move: Optional[Cell] = None) -> WinResult:
    if last_move is not None:
        return line_through(board, last_move, GOMOKU_LENGTH)
    return find_line(board, GOMOKU_LENGTH)


# ---------- Secret code ----------


@dataclass(frozen=True)
class Feedback:
    correct: int
    misplaced: int


def score_guess(guess: Sequence[str], secret: Sequence[str]) -> Feedback:
    """Exact matches first, then the multiset overlap of what is left."""
    correct = 0
    rest_guess: Counter = Counter()
    rest_secret: Counter = Counter()
    for g, s in zip(guess, secret):
        if g == s:
            correct += 1
        else:
            rest_guess[g] += 1
            rest_secret[s] += 1
    misplaced = sum((rest_guess & rest_secret).values())
    return Feedback(correct=correct, misplaced=misplaced)


def code_cracked(feedback: Feedback, length: int) -> bool:
    return feedback.correct == length


# ---------- Go Fish ----------


def collect_books(hand: Sequence[Card]) -> Tuple[Tuple[Card, ...], Tuple[str, ...]]:
    """Pull every complete rank out of ``hand``. Returns (hand, new books)."""
    counts = Counter(card.rank for card in hand)
    books = tuple(rank for rank in RANKS if counts[rank] == BOOK_SIZE)
    if not books:
        return tuple(hand), ()
    kept = tuple(card for card in hand if card.rank not in books)
    return kept, books


def go_fish_finished(
    hands: Sequence[Sequence[Card]],
    deck: Sequence[Card],
    books: Sequence[Sequence[str]],
) -> bool:
    if sum(len(b) for b in books) == TOTAL_BOOKS:
        return True
    return not deck and all(not hand for hand in hands)


# ---------- Battleship ----------


def fleet_sunk(ships: Iterable) -> bool:
    """True once every ship has taken as many hits as it has cells."""
    fleet = list(ships)
    return bool(fleet) and all(ship.hits == ship.size for ship in fleet)


# ---------- War ----------


def short_seats(deck_sizes: Sequence[int], needed: int) -> Tuple[int, ...]:
    """Seats whose deck cannot supply ``needed`` more cards."""
    return tuple(seat for seat, size in enumerate(deck_sizes) if size < needed)


# ---------- Rummy ----------


MeldKind = Literal["set", "run"]


@dataclass(frozen=True)
class Meld:
    kind: MeldKind
    cards: Tuple[Card, ...]


def _sort_key(card: Card) -> Tuple[int, int]:
    return SUITS.index(card.suit), ACE_LOW[card.rank]


def is_valid_set(cards: Sequence[Card]) -> bool:
    if not 3 <= len(cards) <= 4:
        return False
    return (
        len({card.rank for card in cards}) == 1
        and len({card.suit for card in cards}) == len(cards)
    )


def is_valid_run(cards: Sequence[Card]) -> bool:
    if len(cards) < 3 or len({card.suit for card in cards}) != 1:
        return False
    values = sorted(ACE_LOW[card.rank] for card in cards)
    return all(b == a + 1 for a, b in zip(values, values[1:]))


def candidate_melds(hand: Sequence[Card]) -> List[Meld]:
    """Every set (3 or 4 of a rank) and every run (3+ in a suit) in ``hand``."""
    melds: List[Meld] = []

    by_rank: Dict[str, List[Card]] = defaultdict(list)
    for card in hand:
        by_rank[card.rank].append(card)
    for rank in RANKS:
        cards = by_rank.get(rank, [])
        for size in (3, 4):
            for combo in combinations(cards, size):
                if is_valid_set(combo):
                    melds.append(Meld("set", tuple(combo)))

    by_suit: Dict[str, List[Card]] = defaultdict(list)
    for card in hand:
        by_suit[card.suit].append(card)
    for suit in SUITS:
        cards = sorted(by_suit.get(suit, []), key=_sort_key)
        for start in range(len(cards)):
            for end in range(start + 3, len(cards) + 1):
                run = cards[start:end]
                if not is_valid_run(run):
                    break
                melds.append(Meld("run", tuple(run)))
    return melds


def find_meld_partition(hand: Sequence[Card]) -> Optional[Tuple[Meld, ...]]:
    """Split the whole hand into melds with nothing left over, or None."""
    melds = candidate_melds(hand)
    by_card: Dict[Card, List[Meld]] = defaultdict(list)
    for meld in melds:
        for card in meld.cards:
            by_card[card].append(meld)

    def search(remaining: FrozenSet[Card]) -> Optional[List[Meld]]:
        if not remaining:
            return []
        # Some meld has to cover the lowest remaining card.
        pivot = min(remaining, key=_sort_key)
        for meld in by_card.get(pivot, ()):
            if remaining.issuperset(meld.cards):
                rest = search(remaining.difference(meld.cards))
                if rest is not None:
                    return [meld] + rest
        return None

    found = search(frozenset(hand))
    return tuple(found) if found is not None else None


def can_meld_out(hand: Sequence[Card]) -> bool:
    return bool(hand) and find_meld_partition(hand) is not None
