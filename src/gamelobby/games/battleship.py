"""Battleship: a placement phase for both fleets, then alternating attacks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple
import random

from ..cards import new_seed, seeded_rng
from ..detect import Cell, fleet_sunk
from .common import PlayerInfo, as_cell, in_bounds, make_players, other, seat_of, with_seat

SIZE = 10
FLEET: Tuple[Tuple[str, int], ...] = (
    ("Carrier", 5),
    ("Battleship", 4),
    ("Cruiser", 3),
    ("Submarine", 3),
    ("Destroyer", 2),
)
FLEET_CELLS = sum(size for _, size in FLEET)

EMPTY, SHIP, HIT, MISS = "empty", "ship", "hit", "miss"

Waters = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True)
class Ship:
    name: str
    size: int
    positions: Tuple[Cell, ...]
    hits: int = 0

    @property
    def sunk(self) -> bool:
        return self.hits == self.size


@dataclass(frozen=True)
class Shot:
    attacker: str
    row: int
    col: int
    hit: bool
    sunk: Optional[str] = None


@dataclass(frozen=True)
class BattleshipState:
    players: Tuple[PlayerInfo, PlayerInfo]
    # boards[i] holds seat i's own ships and the shots fired at them.
    boards: Tuple[Waters, Waters]
    fleets: Tuple[Tuple[Ship, ...], Tuple[Ship, ...]] = ((), ())
    phase: str = "placement"  # placement, playing, finished
    placing_ship: Tuple[int, int] = (0, 0)
    placement_horizontal: Tuple[bool, bool] = (True, True)
    current_turn: Optional[str] = None
    remaining: Tuple[int, int] = (0, 0)
    last_action: str = ""
    last_shot: Optional[Shot] = None
    winner: Optional[str] = None
    is_draw: bool = False
    seed: int = 0

    @property
    def finished(self) -> bool:
        return self.phase == "finished"

    def still_placing(self, seat: int) -> bool:
        return self.phase == "placement" and self.placing_ship[seat] < len(FLEET)


def empty_waters() -> Waters:
    return tuple(tuple(EMPTY for _ in range(SIZE)) for _ in range(SIZE))


def ship_cells(cell: Cell, size: int, horizontal: bool) -> Tuple[Cell, ...]:
    r, c = cell
    if horizontal:
        return tuple((r, c + i) for i in range(size))
    return tuple((r + i, c) for i in range(size))


def can_place_ship(board: Waters, cell: Cell, size: int, horizontal: bool) -> bool:
    return all(
        in_bounds(p, SIZE, SIZE) and board[p[0]][p[1]] == EMPTY
        for p in ship_cells(cell, size, horizontal)
    )


def mark(board: Waters, cells: Sequence[Cell], value: str) -> Waters:
    targets = set(cells)
    return tuple(
        tuple(value if (r, c) in targets else v for c, v in enumerate(line))
        for r, line in enumerate(board)
    )


def valid_placements(board: Waters, size: int) -> List[Tuple[Cell, bool]]:
    return [
        ((r, c), horizontal)
        for horizontal in (True, False)
        for r in range(SIZE)
        for c in range(SIZE)
        if can_place_ship(board, (r, c), size, horizontal)
    ]


def shots_at(state: BattleshipState, seat: int) -> Waters:
    """Seat ``seat``'s waters as the opponent sees them: hits and misses only."""
    return tuple(
        tuple(EMPTY if v == SHIP else v for v in line) for line in state.boards[seat]
    )


def init_battleship(
    players: Sequence[PlayerInfo], rng: Optional[random.Random] = None
) -> BattleshipState:
    name, size = FLEET[0]
    return BattleshipState(
        players=make_players(players),
        boards=(empty_waters(), empty_waters()),
        last_action=f"Place your {name} ({size} cells).",
        seed=new_seed(rng),
    )


def _place_one(state: BattleshipState, seat: int, cell: Cell, horizontal: bool) -> BattleshipState:
    name, size = FLEET[state.placing_ship[seat]]
    board = state.boards[seat]
    if not can_place_ship(board, cell, size, horizontal):
        return state
    positions = ship_cells(cell, size, horizontal)
    return replace(
        state,
        boards=with_seat(state.boards, seat, mark(board, positions, SHIP)),
        fleets=with_seat(state.fleets, seat, state.fleets[seat] + (Ship(name, size, positions),)),
        placing_ship=with_seat(state.placing_ship, seat, state.placing_ship[seat] + 1),
        remaining=with_seat(state.remaining, seat, state.remaining[seat] + size),
    )


def _place_rest(state: BattleshipState, seat: int) -> BattleshipState:
    rng = seeded_rng(state.seed, seat * len(FLEET) + state.placing_ship[seat])
    while state.still_placing(seat):
        _, size = FLEET[state.placing_ship[seat]]
        options = valid_placements(state.boards[seat], size)
        if not options:
            break
        cell, horizontal = rng.choice(options)
        state = _place_one(state, seat, cell, horizontal)
    return state


def _after_placement(state: BattleshipState, seat: int) -> BattleshipState:
    if not any(state.still_placing(s) for s in (0, 1)):
        return replace(
            state,
            phase="playing",
            current_turn=state.players[0].id,
            last_action="All ships placed. Open fire!",
        )
    if state.still_placing(seat):
        name, size = FLEET[state.placing_ship[seat]]
        return replace(state, last_action=f"Place your {name} ({size} cells).")
    return replace(state, last_action="Fleet ready. Waiting for the other side.")


def _placement_move(state: BattleshipState, seat: int, move: Mapping) -> BattleshipState:
    if not state.still_placing(seat):
        return state
    if move.get("rotate") is True:
        flipped = not state.placement_horizontal[seat]
        return replace(
            state,
            placement_horizontal=with_seat(state.placement_horizontal, seat, flipped),
            last_action=f"Orientation: {'horizontal' if flipped else 'vertical'}.",
        )
    if move.get("random") is True:
        return _after_placement(_place_rest(state, seat), seat)

    cell = as_cell(move)
    horizontal = move.get("horizontal", state.placement_horizontal[seat])
    if cell is None or not isinstance(horizontal, bool):
        return state
    placed = _place_one(state, seat, cell, horizontal)
    if placed is state:
        return state
    return _after_placement(placed, seat)


def _attack(state: BattleshipState, seat: int, cell: Cell) -> BattleshipState:
    target = other(seat)
    board = state.boards[target]
    if not in_bounds(cell, SIZE, SIZE) or board[cell[0]][cell[1]] in (HIT, MISS):
        return state

    attacker = state.players[seat]
    name = attacker.username or attacker.id
    if board[cell[0]][cell[1]] != SHIP:
        return replace(
            state,
            boards=with_seat(state.boards, target, mark(board, [cell], MISS)),
            current_turn=state.players[target].id,
            last_action=f"{name}: Miss!",
            last_shot=Shot(attacker.id, cell[0], cell[1], hit=False),
        )

    fleet = []
    sunk = None
    for ship in state.fleets[target]:
        if cell in ship.positions:
            ship = replace(ship, hits=ship.hits + 1)
            if ship.sunk:
                sunk = ship.name
        fleet.append(ship)
    fleets = with_seat(state.fleets, target, tuple(fleet))
    done = fleet_sunk(fleet)
    return replace(
        state,
        boards=with_seat(state.boards, target, mark(board, [cell], HIT)),
        fleets=fleets,
        remaining=with_seat(state.remaining, target, state.remaining[target] - 1),
        phase="finished" if done else state.phase,
        winner=attacker.id if done else None,
        last_action=f"{name}: {sunk + ' sunk!' if sunk else 'Hit!'}",
        last_shot=Shot(attacker.id, cell[0], cell[1], hit=True, sunk=sunk),
    )


def apply_battleship(state: BattleshipState, move: Any, player_id: str) -> BattleshipState:
    if state.finished or not isinstance(move, Mapping):
        return state
    seat = seat_of(state.players, player_id)
    if seat is None:
        return state
    if state.phase == "placement":
        return _placement_move(state, seat, move)
    if state.current_turn != player_id:
        return state
    cell = as_cell(move)
    if cell is None:
        return state
    return _attack(state, seat, cell)
