"""Move generators for Tic-Tac-Toe, Connect-N and Gomoku."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import math
import random

from ..detect import DIRECTIONS, Board, Cell, line_through
from ..games.grid import GridState, drop_row, put

Move = Dict[str, int]

WIN_SCORE = 1_000.0
CONNECT_DEPTH = 4

# TT entry flags
EXACT, LOWER, UPPER = 0, 1, 2


@dataclass
class TTEntry:
    score: float
    flag: int


@dataclass
class MinimaxAI:
    """Alpha-beta search scored only by wins and losses.

    Faster wins and slower losses score better. ``depth=None`` searches to
    the end of the game; otherwise positions more than ``depth`` plies past
    the candidate move count as level. ``drop`` switches to Connect-style
    column moves.
    """

    me: str
    opp: str
    win_length: int
    depth: Optional[int] = None
    drop: bool = False
    _tt: Dict[Board, TTEntry] = field(default_factory=dict, repr=False)

    # ---- public API ----

    def choose(self, board: Board) -> Optional[Cell]:
        # Scores depend on the distance from the root, so entries are only
        # valid within one search.
        self._tt.clear()
        best_cell: Optional[Cell] = None
        best = -math.inf
        for cell in self._moves(board):
            child = put(board, cell, self.me)
            score = self._minimax(child, cell, 1, -math.inf, math.inf, False)
            if score > best:
                best, best_cell = score, cell
        return best_cell

    # ---- core search ----

    def _moves(self, board: Board) -> List[Cell]:
        if self.drop:
            cols = len(board[0])
            # Centre columns first: better cutoffs and a centre bias on ties.
            order = sorted(range(cols), key=lambda c: abs(c - (cols - 1) / 2))
            out = []
            for col in order:
                row = drop_row(board, col)
                if row is not None:
                    out.append((row, col))
            return out
        return [
            (r, c)
            for r, line in enumerate(board)
            for c, v in enumerate(line)
            if v is None
        ]

    def _minimax(
        self,
        board: Board,
        last: Cell,
        ply: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        result = line_through(board, last, self.win_length)
        if result.winner == self.me:
            return WIN_SCORE - ply
        if result.winner == self.opp:
            return ply - WIN_SCORE
        if result.is_draw:
            return 0.0
        if self.depth is not None and ply > self.depth:
            return 0.0

        tt_hit = self._tt.get(board)
        if tt_hit:
            if tt_hit.flag == EXACT:
                return tt_hit.score
            if tt_hit.flag == LOWER:
                alpha = max(alpha, tt_hit.score)
            elif tt_hit.flag == UPPER:
                beta = min(beta, tt_hit.score)
            if alpha >= beta:
                return tt_hit.score

        alpha0, beta0 = alpha, beta
        mark = self.me if maximizing else self.opp
        value = -math.inf if maximizing else math.inf
        for cell in self._moves(board):
            score = self._minimax(
                put(board, cell, mark), cell, ply + 1, alpha, beta, not maximizing
            )
            if maximizing:
                value = max(value, score)
                alpha = max(alpha, value)
            else:
                value = min(value, score)
                beta = min(beta, value)
            if alpha >= beta:
                break

        if value <= alpha0:
            flag = UPPER
        elif value >= beta0:
            flag = LOWER
        else:
            flag = EXACT
        self._tt[board] = TTEntry(score=value, flag=flag)
        return value


# ---------- shared helpers ----------


def _symbols(state: GridState) -> Tuple[str, str]:
    me = state.symbol_of(state.current_player) or "O"
    opp = next((p.symbol for p in state.players if p.symbol != me), "X")
    return me, opp


def _empty_cells(board: Board) -> List[Cell]:
    return [(r, c) for r, line in enumerate(board) for c, v in enumerate(line) if v is None]


def _run_length(board: Board, cell: Cell, mark: str) -> int:
    """Longest line through ``cell`` if ``mark`` were placed there."""
    rows, cols = len(board), len(board[0])
    best = 0
    for dr, dc in DIRECTIONS:
        count = 1
        for sign in (1, -1):
            r, c = cell[0] + sign * dr, cell[1] + sign * dc
            while 0 <= r < rows and 0 <= c < cols and board[r][c] == mark:
                count += 1
                r, c = r + sign * dr, c + sign * dc
        best = max(best, count)
    return best


def _finishing(board: Board, cells: List[Cell], mark: str, n: int) -> Optional[Cell]:
    for cell in cells:
        if _run_length(board, cell, mark) >= n:
            return cell
    return None


def _as_move(cell: Cell) -> Move:
    return {"row": cell[0], "col": cell[1]}


# ---------- Tic-Tac-Toe ----------


def tictactoe_move(
    state: GridState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Move]:
    rng = rng or random.Random()
    board = state.board
    empty = _empty_cells(board)
    if state.finished or not empty:
        return None
    if difficulty == "easy":
        return _as_move(rng.choice(empty))

    me, opp = _symbols(state)
    n = state.win_length
    for mark in (me, opp):
        cell = _finishing(board, empty, mark, n)
        if cell is not None:
            return _as_move(cell)

    if difficulty == "medium":
        centre = (state.rows // 2, state.cols // 2)
        if board[centre[0]][centre[1]] is None:
            return _as_move(centre)
        return _as_move(rng.choice(empty))

    cell = MinimaxAI(me=me, opp=opp, win_length=n).choose(board)
    return _as_move(cell if cell is not None else rng.choice(empty))


# ---------- Connect-N ----------


def connect_move(
    state: GridState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Move]:
    rng = rng or random.Random()
    board = state.board
    drops = [(drop_row(board, c), c) for c in range(state.cols)]
    cells = [(r, c) for r, c in drops if r is not None]
    if state.finished or not cells:
        return None
    if difficulty == "easy":
        return {"col": rng.choice(cells)[1]}

    me, opp = _symbols(state)
    n = state.win_length
    for mark in (me, opp):
        cell = _finishing(board, cells, mark, n)
        if cell is not None:
            return {"col": cell[1]}

    if difficulty == "medium":
        centre = state.cols // 2
        if any(c == centre for _, c in cells) and rng.random() > 0.3:
            return {"col": centre}
        return {"col": rng.choice(cells)[1]}

    ai = MinimaxAI(me=me, opp=opp, win_length=n, depth=CONNECT_DEPTH, drop=True)
    cell = ai.choose(board)
    return {"col": (cell if cell is not None else cells[0])[1]}


# ---------- Gomoku ----------


def _neighbour_score(board: Board, cell: Cell) -> int:
    """2 per stone in the surrounding 3x3, 1 per stone in the 5x5 ring; 0 if isolated."""
    rows, cols = len(board), len(board[0])
    score = 0
    for dr in range(-2, 3):
        for dc in range(-2, 3):
            r, c = cell[0] + dr, cell[1] + dc
            if (dr or dc) and 0 <= r < rows and 0 <= c < cols and board[r][c] is not None:
                score += 2 if abs(dr) <= 1 and abs(dc) <= 1 else 1
    return score


def gomoku_move(
    state: GridState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Move]:
    rng = rng or random.Random()
    board = state.board
    empty = _empty_cells(board)
    if state.finished or not empty:
        return None
    if difficulty == "easy":
        return _as_move(rng.choice(empty))

    scored = [(cell, _neighbour_score(board, cell)) for cell in empty]
    candidates = [(cell, score) for cell, score in scored if score > 0]
    if not candidates:
        centre = (state.rows // 2, state.cols // 2)
        return _as_move(centre if board[centre[0]][centre[1]] is None else rng.choice(empty))

    if difficulty == "hard":
        me, opp = _symbols(state)
        cells = [cell for cell, _ in candidates]
        for mark in (me, opp):
            forced = _finishing(board, cells, mark, state.win_length)
            if forced is not None:
                return _as_move(forced)
        candidates = [
            (cell, score + 4 * _run_length(board, cell, me) ** 2 + 3 * _run_length(board, cell, opp) ** 2)
            for cell, score in candidates
        ]
        top = max(score for _, score in candidates)
        return _as_move(rng.choice([cell for cell, score in candidates if score == top]))

    candidates.sort(key=lambda item: item[1], reverse=True)
    return _as_move(rng.choice(candidates[:5])[0])
