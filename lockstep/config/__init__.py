"""Configuration layer: constants and typed config dataclasses."""

from lockstep.config.constants import (
    DEFAULT_ATTEMPTS,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_MOVES,
    DEFAULT_MAX_VISITED,
    DEFAULT_WIDTH,
    GENERATOR_MAX_VISITED,
    PATH_MODULUS,
    REPLAY_MAX_MOVES,
    TRAIL_MODULUS,
    WALKABLE_MAX,
)
from lockstep.config.types import BatchConfig, GeneratorConfig, SolverConfig

__all__ = [
    "BatchConfig",
    "DEFAULT_ATTEMPTS",
    "DEFAULT_HEIGHT",
    "DEFAULT_MAX_MOVES",
    "DEFAULT_MAX_VISITED",
    "DEFAULT_WIDTH",
    "GENERATOR_MAX_VISITED",
    "GeneratorConfig",
    "PATH_MODULUS",
    "REPLAY_MAX_MOVES",
    "SolverConfig",
    "TRAIL_MODULUS",
    "WALKABLE_MAX",
]
