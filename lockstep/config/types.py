"""Configuration dataclasses for solving, generation, and batch runs.

All frozen dataclasses validate their fields in ``__post_init__`` and raise
``ValueError`` on out-of-range values. Nothing is clamped silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lockstep.config.constants import (
    DEFAULT_ATTEMPTS,
    DEFAULT_HEIGHT,
    DEFAULT_LAVA_PROBABILITY,
    DEFAULT_MAX_MOVES,
    DEFAULT_MAX_VISITED,
    DEFAULT_PATH_WORK_BUDGET,
    DEFAULT_TURN_PROBABILITY,
    DEFAULT_WIDTH,
    GENERATOR_MAX_VISITED,
    MAX_ATTEMPTS,
    MAX_BATCH_LEVELS,
    MAX_DIFFICULTY,
    MAX_DIMENSION,
    MAX_PLAYERS,
    MIN_ATTEMPTS,
    MIN_DIFFICULTY,
    MIN_DIMENSION,
    MIN_PLAYERS,
    SEED_MAX_LENGTH,
)

__all__ = [
    "BatchConfig",
    "GeneratorConfig",
    "SolverConfig",
]


def _require_int_in_range(value: object, name: str, low: int, high: int) -> None:
    """Raise ValueError unless ``value`` is an int (not bool) within [low, high]."""
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueError(f"{name} must be an integer between {low} and {high}.")


def _require_seed(seed: object) -> None:
    if not isinstance(seed, str):
        raise ValueError("seed must be a string.")
    if len(seed) >= SEED_MAX_LENGTH:
        raise ValueError(f"seed must be shorter than {SEED_MAX_LENGTH} characters.")


@dataclass(frozen=True)
class SolverConfig:
    """Budgets for one breadth-first solve."""

    max_moves: int = DEFAULT_MAX_MOVES
    max_visited: int = DEFAULT_MAX_VISITED

    def __post_init__(self) -> None:
        if isinstance(self.max_moves, bool) or not isinstance(self.max_moves, int):
            raise ValueError("max_moves must be an integer")
        if self.max_moves < 0:
            raise ValueError("max_moves must be >= 0")
        if isinstance(self.max_visited, bool) or not isinstance(self.max_visited, int):
            raise ValueError("max_visited must be an integer")
        if self.max_visited < 1:
            raise ValueError("max_visited must be >= 1")


@dataclass(frozen=True)
class GeneratorConfig:
    """Parameters for one constrained level generation request."""

    seed: str
    players: int
    difficulty: int
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    max_attempts: int = DEFAULT_ATTEMPTS
    lava_probability: float = DEFAULT_LAVA_PROBABILITY
    turn_probability: float = DEFAULT_TURN_PROBABILITY
    path_work_budget: int = DEFAULT_PATH_WORK_BUDGET
    max_visited: int = GENERATOR_MAX_VISITED

    def __post_init__(self) -> None:
        _require_seed(self.seed)
        _require_int_in_range(self.players, "players", MIN_PLAYERS, MAX_PLAYERS)
        _require_int_in_range(self.difficulty, "difficulty", MIN_DIFFICULTY, MAX_DIFFICULTY)
        _require_int_in_range(self.width, "width", MIN_DIMENSION, MAX_DIMENSION)
        _require_int_in_range(self.height, "height", MIN_DIMENSION, MAX_DIMENSION)
        _require_int_in_range(self.max_attempts, "max_attempts", MIN_ATTEMPTS, MAX_ATTEMPTS)
        if not 0.0 <= self.lava_probability <= 1.0:
            raise ValueError("lava_probability must be in [0.0, 1.0]")
        if not 0.0 <= self.turn_probability <= 1.0:
            raise ValueError("turn_probability must be in [0.0, 1.0]")
        if self.path_work_budget < 1:
            raise ValueError("path_work_budget must be >= 1")
        if self.max_visited < 1:
            raise ValueError("max_visited must be >= 1")


@dataclass(frozen=True)
class BatchConfig:
    """Settings for generating a grid of (seed, difficulty) levels in one run."""

    seeds: tuple[str, ...]
    difficulties: tuple[int, ...]
    players: int = 1
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    max_attempts: int = DEFAULT_ATTEMPTS
    out_dir: Path = Path("data")

    def __post_init__(self) -> None:
        if not self.seeds:
            raise ValueError("seeds must not be empty")
        if not self.difficulties:
            raise ValueError("difficulties must not be empty")
        if len(set(self.seeds)) != len(self.seeds):
            raise ValueError("seeds must be distinct")
        if len(self.seeds) * len(self.difficulties) > MAX_BATCH_LEVELS:
            raise ValueError(
                "batch size exceeds safety threshold; reduce seeds or difficulties"
            )
        # Validate every combination up front so a bad value fails before any work.
        for seed in self.seeds:
            for difficulty in self.difficulties:
                self.generator_config(seed, difficulty)

    def generator_config(self, seed: str, difficulty: int) -> GeneratorConfig:
        """Build the per-level generator config for one batch cell."""
        return GeneratorConfig(
            seed=seed,
            players=self.players,
            difficulty=difficulty,
            width=self.width,
            height=self.height,
            max_attempts=self.max_attempts,
        )
