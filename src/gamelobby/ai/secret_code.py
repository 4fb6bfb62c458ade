"""Secret Code opponent: random secrets, random or consistent guesses."""

from __future__ import annotations

from itertools import product
from typing import Any, Dict, List, Optional, Sequence
import random

from ..detect import score_guess
from ..games.common import other, seat_of
from ..games.secret_code import Code, Guess, SecretCodeState, random_code

MEDIUM_SAMPLE = 300

Move = Dict[str, Any]


def _consistent(code: Code, history: Sequence[Guess]) -> bool:
    for guess in history:
        fb = score_guess(guess.code, code)
        if (fb.correct, fb.misplaced) != (guess.correct, guess.misplaced):
            return False
    return True


def _guess(state: SecretCodeState, player_id: str, difficulty: str, rng: random.Random) -> Code:
    pool, length = state.pool, state.length
    history = state.guesses_by(player_id)
    if difficulty == "easy" or not history:
        return random_code(pool, length, rng)
    if difficulty == "medium":
        for _ in range(MEDIUM_SAMPLE):
            code = random_code(pool, length, rng)
            if _consistent(code, history):
                return code
        return random_code(pool, length, rng)
    options: List[Code] = [
        code for code in product(pool, repeat=length) if _consistent(code, history)
    ]
    return rng.choice(options) if options else random_code(pool, length, rng)


def secret_code_move(
    state: SecretCodeState,
    difficulty: str = "medium",
    rng: Optional[random.Random] = None,
    player_id: Optional[str] = None,
) -> Optional[Move]:
    rng = rng or random.Random()
    if state.finished:
        return None

    if state.phase == "setup":
        if player_id is not None:
            seat = seat_of(state.players, player_id)
        else:
            seat = next((s for s in (1, 0) if state.secrets[s] is None), None)
        if seat is None or state.secrets[seat] is not None:
            return None
        return {"action": "set_secret", "code": list(random_code(state.pool, state.length, rng))}

    mover = state.current_player
    if mover is None or (player_id is not None and player_id != mover):
        return None
    seat = seat_of(state.players, mover)
    if seat is None or state.secrets[other(seat)] is None:
        return None
    return {"action": "guess", "code": list(_guess(state, mover, difficulty, rng))}
