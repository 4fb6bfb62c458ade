"""Tic-Tac-Toe, Connect-N and Gomoku: one state shape, three placement rules."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from ..detect import (
    GOMOKU_LENGTH,
    TICTACTOE_LENGTH,
    Board,
    Cell,
    WinResult,
    check_connect,
    check_gomoku,
    check_tictactoe,
)
from .common import (
    MoveRecord,
    PlayerInfo,
    as_cell,
    as_int,
    in_bounds,
    make_players,
    now_or,
)

SYMBOLS: Tuple[str, str] = ("X", "O")

TICTACTOE_SIZE = 3
GOMOKU_SIZE = 15
# Connect-N board (rows, cols) by N.
CONNECT_SIZES: Dict[int, Tuple[int, int]] = {3: (4, 5), 4: (6, 7)}


@dataclass(frozen=True)
class GridState:
    board: Board
    players: Tuple[PlayerInfo, PlayerInfo]
    current_player: str
    win_length: int
    winner: Optional[str] = None
    is_draw: bool = False
    winning_cells: Tuple[Cell, ...] = ()
    last_move: Optional[Cell] = None
    move_history: Tuple[MoveRecord, ...] = ()
    difficulty: str = "medium"

    @property
    def rows(self) -> int:
        return len(self.board)

    @property
    def cols(self) -> int:
        return len(self.board[0]) if self.board else 0

    @property
    def finished(self) -> bool:
        return self.winner is not None or self.is_draw

    def symbol_of(self, player_id: str) -> Optional[str]:
        for player in self.players:
            if player.id == player_id:
                return player.symbol
        return None

    def player_with(self, symbol: str) -> Optional[str]:
        for player in self.players:
            if player.symbol == symbol:
                return player.id
        return None

    def opponent_of(self, player_id: str) -> str:
        for player in self.players:
            if player.id != player_id:
                return player.id
        return player_id


def empty_board(rows: int, cols: int) -> Board:
    return tuple(tuple(None for _ in range(cols)) for _ in range(rows))


def put(board: Board, cell: Cell, mark: Optional[str]) -> Board:
    r, c = cell
    return tuple(
        tuple(mark if (i, j) == (r, c) else v for j, v in enumerate(line)) if i == r else line
        for i, line in enumerate(board)
    )


def drop_row(board: Board, col: int) -> Optional[int]:
    """Lowest empty row of ``col``, or None when the column is full."""
    if not 0 <= col < len(board[0]):
        return None
    for row in range(len(board) - 1, -1, -1):
        if board[row][col] is None:
            return row
    return None


def init_grid(
    rows: int,
    cols: int,
    win_length: int,
    players: Sequence[PlayerInfo],
    difficulty: str = "medium",
) -> GridState:
    seated = make_players(players, SYMBOLS)
    return GridState(
        board=empty_board(rows, cols),
        players=seated,
        current_player=seated[0].id,
        win_length=win_length,
        difficulty=difficulty,
    )


def init_tictactoe(players: Sequence[PlayerInfo], difficulty: str = "medium") -> GridState:
    return init_grid(TICTACTOE_SIZE, TICTACTOE_SIZE, TICTACTOE_LENGTH, players, difficulty)


def init_connect(
    players: Sequence[PlayerInfo], n: int = 4, difficulty: str = "medium"
) -> GridState:
    rows, cols = CONNECT_SIZES.get(n, CONNECT_SIZES[4])
    return init_grid(rows, cols, n, players, difficulty)


def init_gomoku(players: Sequence[PlayerInfo], difficulty: str = "medium") -> GridState:
    return init_grid(GOMOKU_SIZE, GOMOKU_SIZE, GOMOKU_LENGTH, players, difficulty)


def _place(
    state: GridState,
    cell: Cell,
    player_id: str,
    detector: Callable[[Board, Cell], WinResult],
    now: Optional[float],
) -> GridState:
    if state.finished or state.current_player != player_id:
        return state
    if not in_bounds(cell, state.rows, state.cols) or state.board[cell[0]][cell[1]] is not None:
        return state
    symbol = state.symbol_of(player_id)
    if not symbol:
        return state

    board = put(state.board, cell, symbol)
    result = detector(board, cell)
    winner = state.player_with(result.winner) if result.winner else None
    record = MoveRecord(
        player_id=player_id,
        move={"row": cell[0], "col": cell[1]},
        timestamp=now_or(now),
    )
    return replace(
        state,
        board=board,
        current_player=state.opponent_of(player_id),
        winner=winner,
        is_draw=result.is_draw and winner is None,
        winning_cells=result.winning_cells,
        last_move=cell,
        move_history=state.move_history + (record,),
    )


def apply_tictactoe(
    state: GridState, move: Any, player_id: str, now: Optional[float] = None
) -> GridState:
    cell = as_cell(move)
    if cell is None:
        return state
    return _place(state, cell, player_id, lambda b, _: check_tictactoe(b), now)


def apply_gomoku(
    state: GridState, move: Any, player_id: str, now: Optional[float] = None
) -> GridState:
    cell = as_cell(move)
    if cell is None:
        return state
    return _place(state, cell, player_id, check_gomoku, now)


def apply_connect(
    state: GridState, move: Any, player_id: str, now: Optional[float] = None
) -> GridState:
    """Drop a disc into ``move["col"]``; a full column is a no-op."""
    if not isinstance(move, Mapping):
        return state
    col = as_int(move.get("col"))
    if col is None:
        return state
    row = drop_row(state.board, col)
    if row is None:
        return state
    n = state.win_length
    return _place(state, (row, col), player_id, lambda b, c: check_connect(b, n, c), now)
