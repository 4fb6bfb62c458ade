"""Secret Code (Mastermind).

``duel``: both players set a secret during setup and then alternate
guessing each other's code; the first to crack it wins.
``classic``: a random secret is drawn for seat 1 and seat 0 guesses alone.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import random

from ..detect import code_cracked, score_guess
from .common import PlayerInfo, make_players, other, seat_of, with_seat

CODE_LENGTH = 4
MAX_GUESSES = 10
POOLS: Dict[str, Tuple[str, ...]] = {
    "colors": ("red", "blue", "green", "yellow", "purple", "orange"),
    "numbers": tuple(str(d) for d in range(10)),
    "letters": ("A", "B", "C", "D", "E", "F"),
}

Code = Tuple[str, ...]


@dataclass(frozen=True)
class Guess:
    player_id: str
    code: Code
    correct: int
    misplaced: int


@dataclass(frozen=True)
class SecretCodeState:
    players: Tuple[PlayerInfo, PlayerInfo]
    code_type: str = "colors"
    variant: str = "duel"
    length: int = CODE_LENGTH
    max_guesses: int = MAX_GUESSES
    # secrets[i] is the code seat i chose; the other seat has to crack it.
    secrets: Tuple[Optional[Code], Optional[Code]] = (None, None)
    phase: str = "setup"  # setup, playing, finished
    current_player: Optional[str] = None
    guesses: Tuple[Guess, ...] = ()
    winner: Optional[str] = None
    is_draw: bool = False

    @property
    def pool(self) -> Tuple[str, ...]:
        return POOLS.get(self.code_type, POOLS["colors"])

    @property
    def finished(self) -> bool:
        return self.phase == "finished"

    def guesses_by(self, player_id: str) -> Tuple[Guess, ...]:
        return tuple(g for g in self.guesses if g.player_id == player_id)


def random_code(pool: Sequence[str], length: int, rng: random.Random) -> Code:
    return tuple(rng.choice(pool) for _ in range(length))


def init_secret_code(
    players: Sequence[PlayerInfo],
    code_type: str = "colors",
    variant: str = "duel",
    rng: Optional[random.Random] = None,
) -> SecretCodeState:
    seated = make_players(players)
    state = SecretCodeState(players=seated, code_type=code_type, variant=variant)
    if variant == "classic":
        secret = random_code(state.pool, state.length, rng or random.Random())
        return replace(
            state,
            secrets=(None, secret),
            phase="playing",
            current_player=seated[0].id,
        )
    return state


def parse_code(state: SecretCodeState, raw: Any) -> Optional[Code]:
    if not isinstance(raw, (list, tuple)) or len(raw) != state.length:
        return None
    if not all(isinstance(symbol, str) and symbol in state.pool for symbol in raw):
        return None
    return tuple(raw)


def _set_secret(state: SecretCodeState, seat: int, code: Code) -> SecretCodeState:
    if state.phase != "setup" or state.variant != "duel" or state.secrets[seat] is not None:
        return state
    secrets = with_seat(state.secrets, seat, code)
    if all(s is not None for s in secrets):
        return replace(
            state,
            secrets=secrets,
            phase="playing",
            current_player=state.players[0].id,
        )
    return replace(state, secrets=secrets)


def _guess(state: SecretCodeState, seat: int, code: Code) -> SecretCodeState:
    player_id = state.players[seat].id
    if state.phase != "playing" or state.current_player != player_id:
        return state
    secret = state.secrets[other(seat)]
    if secret is None:
        return state

    feedback = score_guess(code, secret)
    guesses = state.guesses + (
        Guess(player_id, code, feedback.correct, feedback.misplaced),
    )
    if code_cracked(feedback, state.length):
        return replace(state, guesses=guesses, phase="finished", winner=player_id)

    if state.variant == "classic":
        if len(guesses) >= state.max_guesses:
            return replace(
                state, guesses=guesses, phase="finished", winner=state.players[1].id
            )
        return replace(state, guesses=guesses)

    used = [sum(1 for g in guesses if g.player_id == p.id) for p in state.players]
    if all(n >= state.max_guesses for n in used):
        return replace(state, guesses=guesses, phase="finished", is_draw=True)
    return replace(
        state, guesses=guesses, current_player=state.players[other(seat)].id
    )


def apply_secret_code(state: SecretCodeState, move: Any, player_id: str) -> SecretCodeState:
    if state.finished or not isinstance(move, Mapping):
        return state
    seat = seat_of(state.players, player_id)
    code = parse_code(state, move.get("code"))
    if seat is None or code is None:
        return state
    action = move.get("action")
    if action == "set_secret":
        return _set_secret(state, seat, code)
    if action == "guess":
        return _guess(state, seat, code)
    return state
