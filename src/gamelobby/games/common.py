"""Types and small helpers shared by the per-game state machines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, TypeVar
import time

DIFFICULTIES: Tuple[str, ...] = ("easy", "medium", "hard")

T = TypeVar("T")


@dataclass(frozen=True)
class PlayerInfo:
    id: str
    username: str = ""
    symbol: str = ""


@dataclass(frozen=True)
class MoveRecord:
    player_id: str
    move: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0


def make_players(
    players: Sequence[PlayerInfo], symbols: Tuple[str, str] = ("", "")
) -> Tuple[PlayerInfo, PlayerInfo]:
    """Exactly two players; fills in symbols the caller left blank."""
    if len(players) != 2:
        raise ValueError("A game needs exactly two players")
    return tuple(  # type: ignore[return-value]
        p if p.symbol or not symbols[i] else PlayerInfo(p.id, p.username, symbols[i])
        for i, p in enumerate(players)
    )


def seat_of(players: Sequence[PlayerInfo], player_id: str) -> Optional[int]:
    for seat, player in enumerate(players):
        if player.id == player_id:
            return seat
    return None


def other(seat: int) -> int:
    return 1 - seat


def with_seat(pair: Tuple[T, T], seat: int, value: T) -> Tuple[T, T]:
    return (value, pair[1]) if seat == 0 else (pair[0], value)


def now_or(now: Optional[float]) -> float:
    return time.time() if now is None else now


# ---------- move payload coercion ----------


def as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def as_cell(value: Any) -> Optional[Tuple[int, int]]:
    """Accept ``[r, c]``/``(r, c)`` or ``{"row": r, "col": c}``."""
    if isinstance(value, Mapping):
        row, col = as_int(value.get("row")), as_int(value.get("col"))
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        row, col = as_int(value[0]), as_int(value[1])
    else:
        return None
    if row is None or col is None:
        return None
    return row, col


def in_bounds(cell: Tuple[int, int], rows: int, cols: int) -> bool:
    return 0 <= cell[0] < rows and 0 <= cell[1] < cols
