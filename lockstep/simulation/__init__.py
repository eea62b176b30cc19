"""Simulation helpers layered over the turn engine: histories and replays."""

from lockstep.simulation.replay import (
    ReplayVerdict,
    format_replay,
    parse_replay,
    simulate,
    state_snapshot,
    verify_replay,
)

__all__ = [
    "ReplayVerdict",
    "format_replay",
    "parse_replay",
    "simulate",
    "state_snapshot",
    "verify_replay",
]
