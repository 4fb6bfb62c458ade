"""Lossless conversion between game states and JSON-compatible dicts."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from pydantic import TypeAdapter

from .dispatcher import get_entry


@lru_cache(maxsize=None)
def _adapter(state_type: type) -> TypeAdapter:
    return TypeAdapter(state_type)


def dump_state(state: Any) -> Dict[str, Any]:
    return _adapter(type(state)).dump_python(state, mode="json")


def load_state(game_type: str, data: Dict[str, Any]) -> Any:
    """Rebuild a state dumped by :func:`dump_state`.

    Raises ``UnknownGameError`` for an unknown game type and pydantic's
    ``ValidationError`` for data of the wrong shape.
    """
    return _adapter(get_entry(game_type).state_type).validate_python(data)
