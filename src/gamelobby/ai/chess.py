"""Capture-first chess opponent. No lookahead past the move itself."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import random

from ..games.chess import PIECE_VALUES, ChessMove, ChessState, home_row, legal_chess_moves, opposite

PROMOTION_BONUS = 80


def _score(state: ChessState, move: ChessMove, difficulty: str) -> int:
    src, dst = move
    score = 0
    target = state.piece_at(dst)
    if target is not None:
        score += PIECE_VALUES[target.type] * 10
    if difficulty == "hard":
        piece = state.piece_at(src)
        if piece is not None and piece.type == "p" and dst[0] == home_row(opposite(piece.color)):
            score += PROMOTION_BONUS
    return score


def _as_move(move: ChessMove) -> Dict[str, Any]:
    src, dst = move
    return {"from": [src[0], src[1]], "to": [dst[0], dst[1]]}


def chess_move(
    state: ChessState, difficulty: str = "medium", rng: Optional[random.Random] = None
) -> Optional[Dict[str, Any]]:
    rng = rng or random.Random()
    if state.finished:
        return None
    moves = legal_chess_moves(state)
    if not moves:
        return None
    if difficulty == "easy":
        return _as_move(rng.choice(moves))

    scored = [(move, _score(state, move, difficulty)) for move in moves]
    best = max(score for _, score in scored)
    top: List[ChessMove] = [move for move, score in scored if score == best]
    return _as_move(rng.choice(top))
