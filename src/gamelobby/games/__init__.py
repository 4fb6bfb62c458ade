"""Per-game state machines. Every ``apply_*`` returns the state unchanged on an illegal move."""

from .battleship import BattleshipState, apply_battleship, init_battleship
from .chess import ChessState, apply_chess, init_chess
from .common import PlayerInfo
from .go_fish import GoFishState, apply_go_fish, init_go_fish
from .grid import (
    GridState,
    apply_connect,
    apply_gomoku,
    apply_tictactoe,
    init_connect,
    init_gomoku,
    init_tictactoe,
)
from .rummy import RummyState, apply_rummy, declare_rummy, init_rummy
from .secret_code import SecretCodeState, apply_secret_code, init_secret_code
from .war import WarState, apply_war, init_war

__all__ = [
    "BattleshipState",
    "ChessState",
    "GoFishState",
    "GridState",
    "PlayerInfo",
    "RummyState",
    "SecretCodeState",
    "WarState",
    "apply_battleship",
    "apply_chess",
    "apply_connect",
    "apply_go_fish",
    "apply_gomoku",
    "apply_rummy",
    "apply_secret_code",
    "apply_tictactoe",
    "apply_war",
    "declare_rummy",
    "init_battleship",
    "init_chess",
    "init_connect",
    "init_go_fish",
    "init_gomoku",
    "init_rummy",
    "init_secret_code",
    "init_tictactoe",
    "init_war",
]
