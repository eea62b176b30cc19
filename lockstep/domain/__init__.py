"""Domain layer: level model, parser, turn engine, and state fingerprints."""

from lockstep.domain.engine import (
    Actor,
    Direction,
    GameState,
    GameStatus,
    TurnEvent,
    advance,
    create_initial_state,
    restart_level,
    set_level,
)
from lockstep.domain.fingerprint import fingerprint_digest, state_fingerprint
from lockstep.domain.level import Level, LevelParseError, parse_level_text, serialize_level
from lockstep.domain.tiles import is_walkable, tile_value

__all__ = [
    "Actor",
    "Direction",
    "GameState",
    "GameStatus",
    "Level",
    "LevelParseError",
    "TurnEvent",
    "advance",
    "create_initial_state",
    "fingerprint_digest",
    "is_walkable",
    "parse_level_text",
    "restart_level",
    "serialize_level",
    "set_level",
    "state_fingerprint",
    "tile_value",
]
