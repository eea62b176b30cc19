"""Replays: move-string parsing, state histories, and clear verification."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from lockstep.config.constants import REPLAY_MAX_MOVES
from lockstep.domain.engine import (
    Direction,
    GameState,
    GameStatus,
    TurnEvent,
    advance,
    create_initial_state,
)
from lockstep.domain.level import parse_level_text

_REPLAY_TOKEN_RE = re.compile(r"(\d*)([udlr])")

_LETTER_TO_DIRECTION: dict[str, Direction] = {
    "u": Direction.UP,
    "d": Direction.DOWN,
    "l": Direction.LEFT,
    "r": Direction.RIGHT,
}

_REPLAY_FORMAT_ERROR = "Replay must use only U, D, L, R moves, with optional counts like 6d."


@dataclass(frozen=True)
class ReplayVerdict:
    ok: bool
    moves: int


def parse_replay(text: str) -> tuple[Direction, ...]:
    """Expand a replay string such as ``"6d2r"`` into directions.

    Raises:
        ValueError: on empty input, unknown characters, zero run lengths, or
            replays longer than ``REPLAY_MAX_MOVES`` after expansion.
    """
    raw = text.strip().lower()
    if not raw:
        raise ValueError("Replay cannot be empty.")

    moves: list[Direction] = []
    consumed = 0
    for match in _REPLAY_TOKEN_RE.finditer(raw):
        if match.start() != consumed:
            raise ValueError(_REPLAY_FORMAT_ERROR)
        consumed = match.end()
        run_text, letter = match.groups()
        run_length = int(run_text) if run_text else 1
        if run_length <= 0:
            raise ValueError("Replay run length must be a positive integer.")
        if len(moves) + run_length > REPLAY_MAX_MOVES:
            raise ValueError(f"Replay cannot exceed {REPLAY_MAX_MOVES} moves.")
        moves.extend([_LETTER_TO_DIRECTION[letter]] * run_length)

    if consumed != len(raw) or not moves:
        raise ValueError(_REPLAY_FORMAT_ERROR)
    return tuple(moves)


def format_replay(moves: Iterable[Direction | str]) -> str:
    """Inverse of ``parse_replay`` without run-length compression."""
    return "".join(Direction(move).value[0] for move in moves)


def simulate(
    initial: GameState, inputs: Iterable[Direction | str | None]
) -> list[GameState]:
    """Apply inputs in order; the returned history starts with ``initial``."""
    history = [initial]
    current = initial
    for direction in inputs:
        current = advance(current, direction)
        history.append(current)
    return history


def state_snapshot(state: GameState) -> dict[str, object]:
    """Plain-data view of a state, suitable for equality checks and JSON."""
    return {
        "level_id": state.level_id,
        "level_index": state.level_index,
        "status": state.status.value,
        "players": [{"id": p.id, "x": p.x, "y": p.y} for p in state.players],
        "enemies": [{"id": e.id, "x": e.x, "y": e.y} for e in state.enemies],
        "players_done": state.players_done,
        "total_players": state.total_players,
        "moves": state.moves,
        "tick": state.tick,
        "last_event": state.last_event.value,
        "grid": ["".join(row) for row in state.grid_rows()],
    }


def verify_replay(level_text: str, replay: str) -> ReplayVerdict:
    """Check whether a replay clears a level without ever resetting.

    ``moves`` is the 1-based index of the move that decided the verdict, or
    the replay length when the replay ends with the level still in play.
    """
    moves = parse_replay(replay)
    state = create_initial_state([parse_level_text("replay", level_text)])
    for index, direction in enumerate(moves):
        state = advance(state, direction)
        if state.last_event is TurnEvent.LEVEL_RESET:
            return ReplayVerdict(ok=False, moves=index + 1)
        if state.status is GameStatus.COMPLETE:
            return ReplayVerdict(ok=True, moves=index + 1)
    return ReplayVerdict(ok=False, moves=len(moves))
