"""Runtime settings, read from ``GAMELOBBY_*`` environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
import os

AI_PLAYER_ID = "ai-player"
DEFAULT_DIFFICULTY = "medium"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    ai_player_id: str = AI_PLAYER_ID
    default_difficulty: str = DEFAULT_DIFFICULTY
    # Seconds the AI "thinks" before its move is applied.
    ai_delay: Tuple[float, float] = (0.5, 1.0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("GAMELOBBY_HOST", cls.host),
            port=int(env.get("GAMELOBBY_PORT", str(cls.port))),
            log_level=env.get("GAMELOBBY_LOG_LEVEL", cls.log_level).upper(),
            ai_player_id=env.get("GAMELOBBY_AI_PLAYER_ID", cls.ai_player_id),
            default_difficulty=env.get("GAMELOBBY_DEFAULT_DIFFICULTY", cls.default_difficulty),
            ai_delay=(
                float(env.get("GAMELOBBY_AI_DELAY_MIN", str(cls.ai_delay[0]))),
                float(env.get("GAMELOBBY_AI_DELAY_MAX", str(cls.ai_delay[1]))),
            ),
        )
