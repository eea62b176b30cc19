"""Canonical state keys for search deduplication.

Two states with the same fingerprint must be interchangeable for solving. The
working grid is part of the key because enemy trail rewrites change future
enemy movement even when no token has moved.
"""

from __future__ import annotations

import hashlib

from lockstep.domain.engine import Actor, GameState


def _actors_key(actors: tuple[Actor, ...]) -> str:
    return ";".join(f"{a.id}:{a.x},{a.y}" for a in sorted(actors, key=lambda a: a.id))


def state_fingerprint(state: GameState) -> str:
    """Return ``done|players|enemies|grid`` for a state.

    Cells are comma-separated inside a row because trail values can be two
    digits wide; rows are separated by ``/``.
    """
    grid_key = "/".join(",".join(row) for row in state.grid_rows())
    return "|".join(
        (
            str(state.players_done),
            _actors_key(state.players),
            _actors_key(state.enemies),
            grid_key,
        )
    )


def fingerprint_digest(state: GameState) -> str:
    """SHA-256 hex of the fingerprint, for compact storage."""
    return hashlib.sha256(state_fingerprint(state).encode()).hexdigest()
