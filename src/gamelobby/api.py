"""FastAPI surface over the dispatcher, with in-memory game sessions.

The server keeps the authoritative state and recomputes every transition
from the submitted move; clients never upload a state.
"""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import Settings
from .dispatcher import (
    UnknownGameError,
    game_types,
    init_game,
    is_finished,
    play_ai_turns,
    submit_move,
    waiting_on,
)
from .games.common import DIFFICULTIES, PlayerInfo
from .serialize import dump_state

logger = logging.getLogger(__name__)

SETTINGS = Settings.from_env()
AI_THINK_DELAY: Tuple[float, float] = SETTINGS.ai_delay
AI_PLAYER_ID = SETTINGS.ai_player_id


@dataclass
class GameSession:
    """One game instance, its players and, optionally, an AI seat."""

    game_type: str
    players: Tuple[PlayerInfo, PlayerInfo]
    difficulty: str
    state: Any
    vs_ai: bool
    move_count: int = 0
    ai_pending: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Game Lobby", description="Classic two-player games with AI opponents")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    game_type: str = Field(alias="gameType")
    difficulty: str = Field(default=SETTINGS.default_difficulty)
    player_id: str = Field(alias="playerId", min_length=1)
    username: str = ""
    opponent_id: Optional[str] = Field(default=None, alias="opponentId", min_length=1)
    opponent_name: str = Field(default="", alias="opponentName")

    @field_validator("difficulty")
    @classmethod
    def ensure_supported_difficulty(cls, value: str) -> str:
        if value not in DIFFICULTIES:
            raise ValueError(
                f"Unsupported difficulty {value!r}. "
                f"Choose one of {', '.join(DIFFICULTIES)}."
            )
        return value


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    player_id: str = Field(alias="playerId", min_length=1)
    move: Dict[str, Any]


def _create_session(request: NewGameRequest) -> Tuple[str, GameSession]:
    vs_ai = request.opponent_id is None
    opponent = (
        PlayerInfo(AI_PLAYER_ID, "AI Opponent")
        if vs_ai
        else PlayerInfo(request.opponent_id or "", request.opponent_name)
    )
    if opponent.id == request.player_id:
        raise HTTPException(status_code=400, detail="Players must have different ids")
    players = (PlayerInfo(request.player_id, request.username), opponent)
    session = GameSession(
        game_type=request.game_type,
        players=players,
        difficulty=request.difficulty,
        state=None,
        vs_ai=vs_ai,
    )
    try:
        session.state = init_game(request.game_type, players, request.difficulty, session.rng)
    except UnknownGameError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created %s session %s (vs_ai=%s)", request.game_type, session_id, vs_ai)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _ai_to_move(session: GameSession) -> bool:
    return session.vs_ai and AI_PLAYER_ID in waiting_on(session.state, session.game_type)


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not _ai_to_move(session):
                return
            session.state, played = play_ai_turns(
                session.state,
                session.game_type,
                ai_player_id=AI_PLAYER_ID,
                difficulty=session.difficulty,
                rng=session.rng,
            )
            session.move_count += len(played)
            logger.debug("AI played %d move(s) in session %s", len(played), game_id)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        waiting = waiting_on(state, session.game_type)
        return {
            "id": game_id,
            "gameType": session.game_type,
            "difficulty": session.difficulty,
            "players": [
                {"id": p.id, "username": p.username} for p in session.players
            ],
            "state": dump_state(state),
            "waitingOn": list(waiting),
            "nextPlayer": waiting[0] if len(waiting) == 1 else None,
            "winner": getattr(state, "winner", None),
            "isDraw": bool(getattr(state, "is_draw", False)),
            "aiPending": session.ai_pending,
            "moveCount": session.move_count,
        }


def _schedule_ai(
    game_id: str, session: GameSession, background_tasks: Optional[BackgroundTasks]
) -> None:
    # Caller holds the session lock.
    if _ai_to_move(session):
        session.ai_pending = True
        if background_tasks is not None:
            background_tasks.add_task(_run_ai_turn, game_id)


def _apply_player_move(
    game_id: str,
    session: GameSession,
    player_id: str,
    move: Dict[str, Any],
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        if is_finished(session.state):
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.vs_ai and player_id == AI_PLAYER_ID:
            raise HTTPException(status_code=400, detail="Cannot move for the AI")

        result = submit_move(
            session.state, move, player_id, session.game_type, ai_player_id=AI_PLAYER_ID
        )
        if not result.accepted:
            raise HTTPException(
                status_code=400, detail="Move is not allowed on this turn"
            )
        session.state = result.state
        session.move_count += 1
        _schedule_ai(game_id, session, background_tasks)


@app.get("/api/games")
def list_games() -> Dict[str, object]:
    return {"gameTypes": game_types(), "difficulties": list(DIFFICULTIES)}


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game_id, session = _create_session(request)
    with session.lock:
        # Some games open with the AI: Battleship placement, Secret Code setup.
        _schedule_ai(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(
        game_id, session, request.player_id, request.move, background_tasks
    )
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        session.state = init_game(
            session.game_type, session.players, session.difficulty, session.rng
        )
        session.move_count = 0
        _schedule_ai(game_id, session, background_tasks)
    return _serialize_session(game_id, session)
