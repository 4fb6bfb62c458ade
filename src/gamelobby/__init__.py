"""Game lobby package exposing the rules engines, AI opponents, and the web application."""

from .dispatcher import (
    GAMES,
    MoveResult,
    UnknownGameError,
    apply_move,
    get_ai_move,
    init_game,
    play_ai_turns,
    submit_move,
)
from .games.common import PlayerInfo
from .serialize import dump_state, load_state

__all__ = [
    "GAMES",
    "MoveResult",
    "PlayerInfo",
    "UnknownGameError",
    "apply_move",
    "dump_state",
    "get_ai_move",
    "init_game",
    "load_state",
    "play_ai_turns",
    "submit_move",
]
