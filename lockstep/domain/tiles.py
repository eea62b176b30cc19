"""Tile predicates shared by the parser, engine, and generator."""

from __future__ import annotations

from lockstep.config.constants import FLOOR, PLAYER_SPAWN, WALKABLE_MAX


def tile_value(tile: str | None) -> int | None:
    """Return the numeric path value of a tile, or None for non-numeric tiles.

    Off-grid lookups pass ``None`` and are treated as non-numeric.
    """
    if tile is None or not tile.isdigit():
        return None
    return int(tile)


def is_walkable(tile: str) -> bool:
    """Floor, spawn markers, and numeric values 1..18 can be entered by players."""
    if tile == FLOOR or tile == PLAYER_SPAWN:
        return True
    value = tile_value(tile)
    return value is not None and 1 <= value <= WALKABLE_MAX
