"""AI move generators: ``(state, difficulty, rng) -> move or None``."""

from .battleship import battleship_move
from .cards import go_fish_move, rummy_move, war_move
from .chess import chess_move
from .grid import MinimaxAI, connect_move, gomoku_move, tictactoe_move
from .secret_code import secret_code_move

__all__ = [
    "MinimaxAI",
    "battleship_move",
    "chess_move",
    "connect_move",
    "go_fish_move",
    "gomoku_move",
    "rummy_move",
    "secret_code_move",
    "tictactoe_move",
    "war_move",
]
