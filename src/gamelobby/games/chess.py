"""Simplified chess: piece movement, castling and promotion.

There is no check detection. A side wins by capturing the opposing king,
and a side left without any movable piece ends the game as a draw.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..detect import Cell
from .common import PlayerInfo, as_cell, in_bounds, make_players, seat_of

SIZE = 8
COLORS: Tuple[str, str] = ("w", "b")  # seat 0 plays white
BACK_RANK: Tuple[str, ...] = ("r", "n", "b", "q", "k", "b", "n", "r")
KING_COL = 4
PIECE_VALUES = {"p": 1, "n": 3, "b": 3, "r": 5, "q": 9, "k": 100}


@dataclass(frozen=True)
class Piece:
    type: str  # p, r, n, b, q or k
    color: str  # w or b


@dataclass(frozen=True)
class CastlingRights:
    kingside: bool = True
    queenside: bool = True


ChessBoard = Tuple[Tuple[Optional[Piece], ...], ...]
ChessMove = Tuple[Cell, Cell]


@dataclass(frozen=True)
class ChessState:
    board: ChessBoard
    players: Tuple[PlayerInfo, PlayerInfo]
    turn: str = "w"
    castling_rights: Tuple[CastlingRights, CastlingRights] = (
        CastlingRights(),
        CastlingRights(),
    )
    last_move: Optional[ChessMove] = None
    winner: Optional[str] = None
    is_draw: bool = False
    difficulty: str = "medium"

    @property
    def finished(self) -> bool:
        return self.winner is not None or self.is_draw

    @property
    def current_player(self) -> str:
        return self.players[COLORS.index(self.turn)].id

    def piece_at(self, cell: Cell) -> Optional[Piece]:
        return self.board[cell[0]][cell[1]]


def opposite(color: str) -> str:
    return "b" if color == "w" else "w"


def home_row(color: str) -> int:
    return SIZE - 1 if color == "w" else 0


def init_chess(players: Sequence[PlayerInfo], difficulty: str = "medium") -> ChessState:
    rows: List[List[Optional[Piece]]] = [[None] * SIZE for _ in range(SIZE)]
    for col, kind in enumerate(BACK_RANK):
        rows[0][col] = Piece(kind, "b")
        rows[1][col] = Piece("p", "b")
        rows[6][col] = Piece("p", "w")
        rows[7][col] = Piece(kind, "w")
    return ChessState(
        board=tuple(tuple(r) for r in rows),
        players=make_players(players, ("white", "black")),
        difficulty=difficulty,
    )


def _path_clear(board: ChessBoard, src: Cell, dst: Cell) -> bool:
    dr = (dst[0] > src[0]) - (dst[0] < src[0])
    dc = (dst[1] > src[1]) - (dst[1] < src[1])
    r, c = src[0] + dr, src[1] + dc
    while (r, c) != dst:
        if board[r][c] is not None:
            return False
        r, c = r + dr, c + dc
    return True


def _can_castle(state: ChessState, src: Cell, dst: Cell, color: str) -> bool:
    row = home_row(color)
    if src != (row, KING_COL) or dst[0] != row:
        return False
    rights = state.castling_rights[COLORS.index(color)]
    if dst[1] == KING_COL + 2:
        allowed, rook_col = rights.kingside, SIZE - 1
    elif dst[1] == KING_COL - 2:
        allowed, rook_col = rights.queenside, 0
    else:
        return False
    if not allowed or state.board[row][rook_col] != Piece("r", color):
        return False
    return _path_clear(state.board, src, (row, rook_col))


def is_valid_chess_move(state: ChessState, src: Cell, dst: Cell) -> bool:
    if not in_bounds(src, SIZE, SIZE) or not in_bounds(dst, SIZE, SIZE) or src == dst:
        return False
    board = state.board
    piece = board[src[0]][src[1]]
    if piece is None or piece.color != state.turn:
        return False
    target = board[dst[0]][dst[1]]
    if target is not None and target.color == piece.color:
        return False

    dr, dc = dst[0] - src[0], dst[1] - src[1]
    adr, adc = abs(dr), abs(dc)

    if piece.type == "p":
        step = -1 if piece.color == "w" else 1
        start = 6 if piece.color == "w" else 1
        if dc == 0 and dr == step:
            return target is None
        if dc == 0 and dr == 2 * step and src[0] == start:
            return target is None and board[src[0] + step][src[1]] is None
        return adc == 1 and dr == step and target is not None
    if piece.type == "r":
        return (dr == 0 or dc == 0) and _path_clear(board, src, dst)
    if piece.type == "n":
        return (adr, adc) in ((1, 2), (2, 1))
    if piece.type == "b":
        return adr == adc and _path_clear(board, src, dst)
    if piece.type == "q":
        return (dr == 0 or dc == 0 or adr == adc) and _path_clear(board, src, dst)
    if piece.type == "k":
        if adr <= 1 and adc <= 1:
            return True
        return dr == 0 and adc == 2 and _can_castle(state, src, dst, piece.color)
    return False


def legal_chess_moves(state: ChessState) -> List[ChessMove]:
    moves: List[ChessMove] = []
    for r in range(SIZE):
        for c in range(SIZE):
            piece = state.board[r][c]
            if piece is None or piece.color != state.turn:
                continue
            for tr in range(SIZE):
                for tc in range(SIZE):
                    if is_valid_chess_move(state, (r, c), (tr, tc)):
                        moves.append(((r, c), (tr, tc)))
    return moves


def parse_chess_move(move: Any) -> Optional[ChessMove]:
    if not isinstance(move, Mapping):
        return None
    src, dst = as_cell(move.get("from")), as_cell(move.get("to"))
    if src is None or dst is None:
        return None
    return src, dst


def _updated_rights(
    rights: Tuple[CastlingRights, CastlingRights], piece: Piece, src: Cell, dst: Cell
) -> Tuple[CastlingRights, CastlingRights]:
    out = list(rights)
    mover = COLORS.index(piece.color)
    if piece.type == "k":
        out[mover] = CastlingRights(False, False)
    elif piece.type == "r" and src[0] == home_row(piece.color):
        if src[1] == 0:
            out[mover] = replace(out[mover], queenside=False)
        elif src[1] == SIZE - 1:
            out[mover] = replace(out[mover], kingside=False)
    # A rook captured on its home corner takes its side's right with it.
    enemy = opposite(piece.color)
    if dst[0] == home_row(enemy):
        idx = COLORS.index(enemy)
        if dst[1] == 0:
            out[idx] = replace(out[idx], queenside=False)
        elif dst[1] == SIZE - 1:
            out[idx] = replace(out[idx], kingside=False)
    return out[0], out[1]


def apply_chess(state: ChessState, move: Any, player_id: str) -> ChessState:
    if state.finished:
        return state
    seat = seat_of(state.players, player_id)
    if seat is None or COLORS[seat] != state.turn:
        return state
    parsed = parse_chess_move(move)
    if parsed is None:
        return state
    src, dst = parsed
    if not is_valid_chess_move(state, src, dst):
        return state

    piece: Piece = state.piece_at(src)  # type: ignore[assignment]
    rows = [list(r) for r in state.board]
    if piece.type == "k" and abs(dst[1] - src[1]) == 2:
        row = src[0]
        if dst[1] > src[1]:
            rows[row][SIZE - 1], rows[row][KING_COL + 1] = None, Piece("r", piece.color)
        else:
            rows[row][0], rows[row][KING_COL - 1] = None, Piece("r", piece.color)
    landed = piece
    if piece.type == "p" and dst[0] == home_row(opposite(piece.color)):
        landed = Piece("q", piece.color)
    rows[dst[0]][dst[1]] = landed
    rows[src[0]][src[1]] = None

    board = tuple(tuple(r) for r in rows)
    enemy = opposite(piece.color)
    king_left = any(p == Piece("k", enemy) for line in board for p in line)
    next_state = replace(
        state,
        board=board,
        turn=enemy,
        castling_rights=_updated_rights(state.castling_rights, piece, src, dst),
        last_move=(src, dst),
        winner=None if king_left else player_id,
    )
    if king_left and not legal_chess_moves(next_state):
        next_state = replace(next_state, is_draw=True)
    return next_state
