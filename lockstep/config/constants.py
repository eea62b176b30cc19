"""Centralized domain constants for the puzzle core.

All magic numbers and tile characters that appear across multiple modules are
defined here. Consuming modules should import from this module rather than
defining their own inline literals.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Tile alphabet
# ---------------------------------------------------------------------------

WALL = "#"
FLOOR = " "
PLAYER_SPAWN = "P"
GOAL = "!"
LAVA = "x"
ENEMY_SPAWN = "1"
"""Enemies spawn on every ``1`` tile; the tile stays part of the patrol loop."""

TILE_ALPHABET: frozenset[str] = frozenset("# !xP0123456789")
"""Every character the level text format accepts."""

PATH_MODULUS = 17
"""Enemy patrol values wrap back to 1 after this value."""

TRAIL_MODULUS = 18
"""An enemy leaving a cell with value ``v`` rewrites it to ``TRAIL_MODULUS - v``."""

WALKABLE_MAX = 18
"""Largest numeric tile value a player may step onto."""

# ---------------------------------------------------------------------------
# Solver budgets
# ---------------------------------------------------------------------------

DEFAULT_MAX_MOVES = 200
"""Default BFS depth cap."""

DEFAULT_MAX_VISITED = 500_000
"""Default cap on distinct fingerprints a single solve may visit."""

GENERATOR_MAX_VISITED = 800_000
"""Visited-state cap used when the generator verifies a candidate."""

# ---------------------------------------------------------------------------
# Generator parameter ranges
# ---------------------------------------------------------------------------

SEED_MAX_LENGTH = 32
"""Seeds must be strictly shorter than this many characters."""

MIN_PLAYERS = 1
MAX_PLAYERS = 128
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 100
MIN_DIMENSION = 7
MAX_DIMENSION = 120
MIN_ATTEMPTS = 1
MAX_ATTEMPTS = 1000

DEFAULT_WIDTH = 25
"""Default generated level width in cells."""

DEFAULT_HEIGHT = 16
"""Default generated level height in cells."""

DEFAULT_ATTEMPTS = 64
"""Default number of seeded attempts before generation gives up."""

DEFAULT_LAVA_PROBABILITY = 0.35
"""Chance that an interior wall touching the path becomes lava."""

DEFAULT_TURN_PROBABILITY = 0.15
"""Chance that the path walk tries a turn before continuing straight."""

DEFAULT_PATH_WORK_BUDGET = 20_000
"""Maximum branch-stack operations per path synthesis attempt."""

# ---------------------------------------------------------------------------
# Replay and batch limits
# ---------------------------------------------------------------------------

REPLAY_MAX_MOVES = 10_000
"""Longest accepted replay after run-length expansion."""

MAX_BATCH_LEVELS = 10_000
"""Safety cap on levels generated by one batch run."""
