"""Routes moves and AI requests to the matching game by its type string.

The dispatcher holds no rules of its own. Unknown game types are a no-op
for :func:`apply_move` and :func:`get_ai_move`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging
import random

from . import ai
from .config import AI_PLAYER_ID, DEFAULT_DIFFICULTY
from .games import (
    BattleshipState,
    ChessState,
    GoFishState,
    GridState,
    RummyState,
    SecretCodeState,
    WarState,
    apply_battleship,
    apply_chess,
    apply_connect,
    apply_go_fish,
    apply_gomoku,
    apply_rummy,
    apply_secret_code,
    apply_tictactoe,
    apply_war,
    init_battleship,
    init_chess,
    init_connect,
    init_go_fish,
    init_gomoku,
    init_rummy,
    init_secret_code,
    init_tictactoe,
    init_war,
)
from .games.common import PlayerInfo

logger = logging.getLogger(__name__)

Move = Dict[str, Any]


class UnknownGameError(ValueError):
    """Raised when a game type has no registered rules."""


@dataclass(frozen=True)
class GameEntry:
    state_type: type
    init: Callable[[Sequence[PlayerInfo], str, random.Random], Any]
    apply: Callable[[Any, Any, str, Optional[float]], Any]
    ai: Callable[[Any, str, random.Random, Optional[str]], Optional[Move]]
    waiting_on: Callable[[Any], Tuple[str, ...]]


@dataclass(frozen=True)
class MoveResult:
    state: Any
    accepted: bool
    waiting_on: Tuple[str, ...] = ()
    ai_to_move: bool = False

    @property
    def next_player(self) -> Optional[str]:
        return self.waiting_on[0] if len(self.waiting_on) == 1 else None


# ---------- whose input each game is waiting for ----------


def _finished(state: Any) -> bool:
    return getattr(state, "winner", None) is not None or bool(getattr(state, "is_draw", False))


def _single(player_id: Optional[str]) -> Tuple[str, ...]:
    return (player_id,) if player_id else ()


def _battleship_waiting(state: BattleshipState) -> Tuple[str, ...]:
    if state.phase == "placement":
        return tuple(p.id for seat, p in enumerate(state.players) if state.still_placing(seat))
    return _single(state.current_turn)


def _secret_code_waiting(state: SecretCodeState) -> Tuple[str, ...]:
    if state.phase == "setup":
        return tuple(p.id for seat, p in enumerate(state.players) if state.secrets[seat] is None)
    return _single(state.current_player)


# ---------- registry ----------


def _grid(init, apply, generator) -> GameEntry:
    return GameEntry(
        state_type=GridState,
        init=lambda players, difficulty, rng: init(players, difficulty=difficulty),
        apply=apply,
        ai=lambda state, difficulty, rng, player_id: generator(state, difficulty, rng),
        waiting_on=lambda state: _single(state.current_player),
    )


def _secret_code(code_type: str) -> GameEntry:
    return GameEntry(
        state_type=SecretCodeState,
        init=lambda players, difficulty, rng: init_secret_code(players, code_type=code_type, rng=rng),
        apply=lambda state, move, player_id, now: apply_secret_code(state, move, player_id),
        ai=ai.secret_code_move,
        waiting_on=_secret_code_waiting,
    )


GAMES: Dict[str, GameEntry] = {
    "tic-tac-toe": _grid(init_tictactoe, apply_tictactoe, ai.tictactoe_move),
    "connect-4": _grid(
        lambda players, difficulty: init_connect(players, n=4, difficulty=difficulty),
        apply_connect,
        ai.connect_move,
    ),
    "connect-3": _grid(
        lambda players, difficulty: init_connect(players, n=3, difficulty=difficulty),
        apply_connect,
        ai.connect_move,
    ),
    "gomoku": _grid(init_gomoku, apply_gomoku, ai.gomoku_move),
    "chess": GameEntry(
        state_type=ChessState,
        init=lambda players, difficulty, rng: init_chess(players, difficulty=difficulty),
        apply=lambda state, move, player_id, now: apply_chess(state, move, player_id),
        ai=lambda state, difficulty, rng, player_id: ai.chess_move(state, difficulty, rng),
        waiting_on=lambda state: _single(state.current_player),
    ),
    "secret-code": _secret_code("colors"),
    "secret-code-numbers": _secret_code("numbers"),
    "secret-code-letters": _secret_code("letters"),
    "go-fish": GameEntry(
        state_type=GoFishState,
        init=lambda players, difficulty, rng: init_go_fish(players, rng=rng),
        apply=lambda state, move, player_id, now: apply_go_fish(state, move, player_id),
        ai=lambda state, difficulty, rng, player_id: ai.go_fish_move(state, difficulty, rng),
        waiting_on=lambda state: _single(state.current_turn),
    ),
    "battleship": GameEntry(
        state_type=BattleshipState,
        init=lambda players, difficulty, rng: init_battleship(players, rng=rng),
        apply=lambda state, move, player_id, now: apply_battleship(state, move, player_id),
        ai=ai.battleship_move,
        waiting_on=_battleship_waiting,
    ),
    "war": GameEntry(
        state_type=WarState,
        init=lambda players, difficulty, rng: init_war(players, rng=rng),
        apply=lambda state, move, player_id, now: apply_war(state, move, player_id),
        ai=lambda state, difficulty, rng, player_id: ai.war_move(state, difficulty, rng),
        # Either player may flip; no seat owns the turn.
        waiting_on=lambda state: (),
    ),
    "rummy": GameEntry(
        state_type=RummyState,
        init=lambda players, difficulty, rng: init_rummy(players, rng=rng),
        apply=lambda state, move, player_id, now: apply_rummy(state, move, player_id),
        ai=lambda state, difficulty, rng, player_id: ai.rummy_move(state, difficulty, rng),
        waiting_on=lambda state: _single(state.current_turn),
    ),
}


def game_types() -> List[str]:
    return list(GAMES)


def get_entry(game_type: str) -> GameEntry:
    try:
        return GAMES[game_type]
    except KeyError as exc:
        raise UnknownGameError(f"Unknown game type {game_type!r}") from exc


# ---------- public API ----------


def init_game(
    game_type: str,
    players: Sequence[PlayerInfo],
    difficulty: str = DEFAULT_DIFFICULTY,
    rng: Optional[random.Random] = None,
) -> Any:
    entry = get_entry(game_type)
    return entry.init(players, difficulty, rng or random.Random())


def is_finished(state: Any) -> bool:
    return _finished(state)


def waiting_on(state: Any, game_type: str) -> Tuple[str, ...]:
    """Ids of the players whose move the game is waiting for."""
    entry = GAMES.get(game_type)
    if entry is None or _finished(state):
        return ()
    return entry.waiting_on(state)


def next_player(state: Any, game_type: str) -> Optional[str]:
    waiting = waiting_on(state, game_type)
    return waiting[0] if len(waiting) == 1 else None


def apply_move(
    state: Any,
    move: Any,
    player_id: str,
    game_type: str,
    now: Optional[float] = None,
) -> Any:
    entry = GAMES.get(game_type)
    if entry is None:
        logger.debug("Ignoring move for unknown game type %r", game_type)
        return state
    new_state = entry.apply(state, move, player_id, now)
    if new_state is state:
        logger.debug("Rejected %s move from %s: %r", game_type, player_id, move)
    elif _finished(new_state) and not _finished(state):
        logger.info(
            "%s finished: winner=%s draw=%s",
            game_type,
            getattr(new_state, "winner", None),
            getattr(new_state, "is_draw", False),
        )
    return new_state


def submit_move(
    state: Any,
    move: Any,
    player_id: str,
    game_type: str,
    ai_player_id: str = AI_PLAYER_ID,
    now: Optional[float] = None,
) -> MoveResult:
    """Like :func:`apply_move`, plus whether it was accepted and whether the AI moves next."""
    new_state = apply_move(state, move, player_id, game_type, now=now)
    accepted = new_state is not state
    waiting = waiting_on(new_state, game_type)
    return MoveResult(
        state=new_state,
        accepted=accepted,
        waiting_on=waiting,
        ai_to_move=ai_player_id in waiting,
    )


def get_ai_move(
    state: Any,
    game_type: str,
    difficulty: str = DEFAULT_DIFFICULTY,
    rng: Optional[random.Random] = None,
    player_id: Optional[str] = None,
) -> Optional[Move]:
    entry = GAMES.get(game_type)
    if entry is None or _finished(state):
        return None
    return entry.ai(state, difficulty, rng or random.Random(), player_id)


def play_ai_turns(
    state: Any,
    game_type: str,
    ai_player_id: str = AI_PLAYER_ID,
    difficulty: str = DEFAULT_DIFFICULTY,
    rng: Optional[random.Random] = None,
    max_moves: int = 64,
    now: Optional[float] = None,
) -> Tuple[Any, List[Move]]:
    """Let the AI move for as long as the game is waiting on it.

    Returns the resulting state and the moves that were applied.
    """
    rng = rng or random.Random()
    played: List[Move] = []
    for _ in range(max_moves):
        if ai_player_id not in waiting_on(state, game_type):
            break
        move = get_ai_move(state, game_type, difficulty, rng, player_id=ai_player_id)
        if move is None:
            break
        result = submit_move(state, move, ai_player_id, game_type, ai_player_id, now=now)
        if not result.accepted:
            logger.warning("AI proposed an illegal %s move: %r", game_type, move)
            break
        state = result.state
        played.append(move)
    return state, played
