"""Battleship opponent: random fleet placement, then hunt-mode targeting."""

from __future__ import annotations

from typing import Dict, List, Optional, Set
import random

from ..detect import Cell
from ..games.battleship import HIT, MISS, SIZE, BattleshipState, shots_at
from ..games.common import other, seat_of

Move = Dict[str, object]

NEIGHBOURS = ((0, 1), (0, -1), (1, 0), (-1, 0))


def _acting_seat(state: BattleshipState, player_id: Optional[str]) -> Optional[int]:
    if player_id is not None:
        return seat_of(state.players, player_id)
    if state.phase == "placement":
        for seat in (1, 0):
            if state.still_placing(seat):
                return seat
        return None
    return seat_of(state.players, state.current_turn or "")


def hunt_targets(state: BattleshipState, seat: int) -> List[Cell]:
    """Untried cells next to a hit on a ship that is still afloat."""
    target = other(seat)
    board = shots_at(state, target)
    sunk: Set[Cell] = {
        p for ship in state.fleets[target] if ship.sunk for p in ship.positions
    }
    out: List[Cell] = []
    for r in range(SIZE):
        for c in range(SIZE):
            if board[r][c] != HIT or (r, c) in sunk:
                continue
            for dr, dc in NEIGHBOURS:
                nr, nc = r + dr, c + dc
                if (
                    0 <= nr < SIZE
                    and 0 <= nc < SIZE
                    and board[nr][nc] not in (HIT, MISS)
                    and (nr, nc) not in out
                ):
                    out.append((nr, nc))
    return out


def battleship_move(
    state: BattleshipState,
    difficulty: str = "medium",
    rng: Optional[random.Random] = None,
    player_id: Optional[str] = None,
) -> Optional[Move]:
    rng = rng or random.Random()
    if state.finished:
        return None
    seat = _acting_seat(state, player_id)
    if seat is None:
        return None
    if state.phase == "placement":
        return {"random": True} if state.still_placing(seat) else None
    if state.current_turn != state.players[seat].id:
        return None

    board = shots_at(state, other(seat))
    untried = [
        (r, c) for r in range(SIZE) for c in range(SIZE) if board[r][c] not in (HIT, MISS)
    ]
    if not untried:
        return None

    if difficulty != "easy":
        hunt = hunt_targets(state, seat)
        if hunt:
            cell = hunt[0]
            return {"row": cell[0], "col": cell[1]}
        if difficulty == "hard":
            # The smallest ship covers two cells, so a checkerboard finds every ship.
            parity = [cell for cell in untried if (cell[0] + cell[1]) % 2 == 0]
            untried = parity or untried

    cell = rng.choice(untried)
    return {"row": cell[0], "col": cell[1]}
