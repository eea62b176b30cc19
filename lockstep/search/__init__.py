"""Search layer: exhaustive breadth-first solving."""

from lockstep.search.solver import MOVE_ORDER, SolveResult, solve, solve_state

__all__ = [
    "MOVE_ORDER",
    "SolveResult",
    "solve",
    "solve_state",
]
