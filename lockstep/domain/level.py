"""Immutable level model and the text-format parser.

Level text is newline-separated rows of equal length over the tile alphabet.
Every ``P`` is a player spawn and every ``1`` an enemy spawn, both collected
in row-major order so ids are stable for a given text.
"""

from __future__ import annotations

from dataclasses import dataclass

from lockstep.config.constants import ENEMY_SPAWN, PLAYER_SPAWN, TILE_ALPHABET

Grid = tuple[tuple[str, ...], ...]
Position = tuple[int, int]


class LevelParseError(ValueError):
    """Raised when level text violates the format contract."""


@dataclass(frozen=True)
class Level:
    """Static level description; never mutated once parsed."""

    level_id: str
    width: int
    height: int
    grid: Grid
    player_spawns: tuple[Position, ...]
    enemy_spawns: tuple[Position, ...]

    def __post_init__(self) -> None:
        if self.height != len(self.grid) or self.height < 1:
            raise ValueError("height must match the number of grid rows")
        if any(len(row) != self.width for row in self.grid) or self.width < 1:
            raise ValueError("every grid row must have exactly `width` cells")
        if not self.player_spawns:
            raise ValueError("a level needs at least one player spawn")
        for x, y in (*self.player_spawns, *self.enemy_spawns):
            if not self.in_bounds(x, y):
                raise ValueError(f"spawn {x},{y} lies outside the grid")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> str | None:
        """Base tile at (x, y), or None when off-grid."""
        if not self.in_bounds(x, y):
            return None
        return self.grid[y][x]


def parse_level_text(level_id: str, raw: str) -> Level:
    """Parse and validate level text.

    Carriage returns are dropped and a single trailing newline is tolerated.

    Raises:
        LevelParseError: on empty text, zero width, ragged rows, characters
            outside the tile alphabet, or a level without player spawns.
    """
    lines = raw.replace("\r", "").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if not lines:
        raise LevelParseError(f"Level {level_id} is empty.")

    width = len(lines[0])
    if width == 0:
        raise LevelParseError(f"Level {level_id} has zero width.")

    rows: list[tuple[str, ...]] = []
    player_spawns: list[Position] = []
    enemy_spawns: list[Position] = []
    for y, line in enumerate(lines):
        if len(line) != width:
            raise LevelParseError(
                f"Level {level_id} is ragged at row {y}. "
                f"Expected width {width}, got {len(line)}."
            )
        for x, tile in enumerate(line):
            if tile not in TILE_ALPHABET:
                raise LevelParseError(
                    f"Level {level_id} contains invalid tile {tile!r} at {x},{y}."
                )
            if tile == PLAYER_SPAWN:
                player_spawns.append((x, y))
            elif tile == ENEMY_SPAWN:
                enemy_spawns.append((x, y))
        rows.append(tuple(line))

    if not player_spawns:
        raise LevelParseError(f"Level {level_id} has no player spawn.")

    return Level(
        level_id=level_id,
        width=width,
        height=len(rows),
        grid=tuple(rows),
        player_spawns=tuple(player_spawns),
        enemy_spawns=tuple(enemy_spawns),
    )


def serialize_level(level: Level) -> str:
    """Render a level back to its text form (no trailing newline)."""
    return "\n".join("".join(row) for row in level.grid)
