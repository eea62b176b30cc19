"""Breadth-first solver over the turn engine's transition graph.

Every node is expanded with the fixed move order up, right, down, left, so
results (including tie-breaks between equally short solutions) are
reproducible. Visited-set membership is keyed by ``state_fingerprint`` and is
permanent for the life of one ``solve`` call. Transitions that reset the level
are not progress and never enter the frontier.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from lockstep.config.constants import DEFAULT_MAX_MOVES, DEFAULT_MAX_VISITED
from lockstep.config.types import SolverConfig
from lockstep.domain.engine import (
    Direction,
    GameState,
    GameStatus,
    TurnEvent,
    advance,
    create_initial_state,
)
from lockstep.domain.fingerprint import state_fingerprint
from lockstep.domain.level import Level

logger = logging.getLogger(__name__)

MOVE_ORDER: tuple[Direction, ...] = tuple(Direction)


@dataclass(frozen=True)
class SolveResult:
    """Outcome of one solve.

    ``min_moves`` and ``move_path`` are None when no solution was found;
    ``truncated`` tells a blown ``max_visited`` budget apart from a level that
    is genuinely unsolvable within ``max_moves``.
    """

    min_moves: int | None
    move_path: tuple[Direction, ...] | None
    visited_count: int
    truncated: bool

    @property
    def solved(self) -> bool:
        return self.min_moves is not None


@dataclass(frozen=True)
class _SearchNode:
    fingerprint: str
    state: GameState
    depth: int


def _is_cleared(state: GameState) -> bool:
    return state.status is GameStatus.COMPLETE or state.last_event is TurnEvent.LEVEL_ADVANCED


def _reconstruct(
    fingerprint: str, parents: dict[str, tuple[str, Direction] | None]
) -> tuple[Direction, ...]:
    moves: list[Direction] = []
    link = parents[fingerprint]
    while link is not None:
        parent_key, direction = link
        moves.append(direction)
        link = parents[parent_key]
    moves.reverse()
    return tuple(moves)


def solve_state(initial: GameState, config: SolverConfig | None = None) -> SolveResult:
    """Find the shortest non-resetting move sequence that clears ``initial``'s level."""
    config = config or SolverConfig()
    root_key = state_fingerprint(initial)
    parents: dict[str, tuple[str, Direction] | None] = {root_key: None}
    frontier: deque[_SearchNode] = deque([_SearchNode(root_key, initial, 0)])

    while frontier:
        node = frontier.popleft()
        if _is_cleared(node.state):
            return SolveResult(
                min_moves=node.depth,
                move_path=_reconstruct(node.fingerprint, parents),
                visited_count=len(parents),
                truncated=False,
            )
        if node.depth >= config.max_moves:
            continue

        for direction in MOVE_ORDER:
            successor = advance(node.state, direction)
            if successor.last_event is TurnEvent.LEVEL_RESET:
                continue
            key = state_fingerprint(successor)
            if key in parents:
                continue
            parents[key] = (node.fingerprint, direction)
            if len(parents) > config.max_visited:
                logger.warning(
                    "Solve of level %s truncated after %s visited states",
                    initial.level_id,
                    len(parents),
                )
                return SolveResult(
                    min_moves=None, move_path=None, visited_count=len(parents), truncated=True
                )
            frontier.append(_SearchNode(key, successor, node.depth + 1))

    return SolveResult(min_moves=None, move_path=None, visited_count=len(parents), truncated=False)


def solve(
    level: Level,
    max_moves: int = DEFAULT_MAX_MOVES,
    max_visited: int = DEFAULT_MAX_VISITED,
) -> SolveResult:
    """Solve a single level from its spawn state.

    Raises:
        ValueError: if either budget is invalid.
    """
    config = SolverConfig(max_moves=max_moves, max_visited=max_visited)
    return solve_state(create_initial_state([level]), config)
