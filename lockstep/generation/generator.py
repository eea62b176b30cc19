"""Constrained level generator with solver verification.

Each attempt draws lane geometry from a seeded stream, synthesizes one
critical path with an explicit-stack backtracking walk, replicates it into
every player's lane, sprinkles lava around it, and then asks the solver for
the true minimum. Path length is only a proxy: an attempt is accepted only
when the solver confirms ``min_moves == difficulty`` exactly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass

from lockstep.config.constants import (
    DEFAULT_ATTEMPTS,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    FLOOR,
    GOAL,
    LAVA,
    PLAYER_SPAWN,
    WALL,
)
from lockstep.config.types import GeneratorConfig
from lockstep.domain.engine import Direction
from lockstep.domain.level import Position, parse_level_text
from lockstep.generation.rng import SeededRandom
from lockstep.search.solver import solve

logger = logging.getLogger(__name__)

_OPPOSITE: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class InfeasibleLayoutError(ValueError):
    """Requested players/difficulty cannot fit the board under any lane layout."""


class GenerationExhaustedError(RuntimeError):
    """No attempt produced a level verified at the requested difficulty."""


@dataclass(frozen=True)
class Feasibility:
    """Closed-form lane capacity for a board and player count."""

    min_rows_per_lane: int
    max_rows_per_lane: int
    max_lane_height: int
    max_path_cells: int

    @property
    def feasible(self) -> bool:
        return self.max_rows_per_lane >= self.min_rows_per_lane


@dataclass(frozen=True)
class LaneGeometry:
    rows_per_lane: int
    lane_height: int
    top_padding: int
    left_to_right: bool

    @property
    def first_lane_top(self) -> int:
        return 1 + self.top_padding

    def lane_offset(self, lane: int) -> int:
        """Vertical shift from the first lane to ``lane``; lanes are split by one row."""
        return lane * (self.lane_height + 1)


@dataclass(frozen=True)
class GeneratedLevel:
    """A verified level plus the metadata needed to reproduce and audit it."""

    seed: str
    attempt: int
    width: int
    height: int
    players: int
    difficulty: int
    rows_per_lane: int
    level_text: str
    min_moves: int
    solver_path: tuple[str, ...]
    designed_path: tuple[str, ...]
    visited_count: int

    def to_dict(self) -> dict[str, object]:
        payload = asdict(self)
        payload["solver_path"] = list(self.solver_path)
        payload["designed_path"] = list(self.designed_path)
        return payload


# ---------------------------------------------------------------------------
# Feasibility
# ---------------------------------------------------------------------------


def check_feasibility(players: int, difficulty: int, width: int, height: int) -> Feasibility:
    """Compute lane capacity without searching.

    A lane with ``r`` serpentine rows holds ``r * inner_width + r - 1`` path
    cells and is ``2r - 1`` rows tall; lanes are separated by one row.
    """
    inner_width = width - 2
    inner_height = height - 2
    min_rows = math.ceil((difficulty + 2) / (inner_width + 1))
    max_lane_height = (inner_height - (players - 1)) // players
    max_rows = (max_lane_height + 1) // 2
    max_path_cells = max(0, max_rows * inner_width + max_rows - 1)
    return Feasibility(
        min_rows_per_lane=min_rows,
        max_rows_per_lane=max_rows,
        max_lane_height=max_lane_height,
        max_path_cells=max_path_cells,
    )


# ---------------------------------------------------------------------------
# Path synthesis
# ---------------------------------------------------------------------------


def _branch_order(rng: SeededRandom, heading: Direction, turn_probability: float) -> list[Direction]:
    """Untried directions for a new path cell; ``pop()`` yields the next to try."""
    turns = [d for d in Direction if d is not heading and d is not _OPPOSITE[heading]]
    rng.shuffle(turns)
    if rng.coin(turn_probability):
        order = [*turns, heading]
    else:
        order = [heading, *turns]
    order.reverse()
    return order


def _keeps_clearance(cell: Position, tail: Position, placed: set[Position]) -> bool:
    """A new cell may only touch the current tail among already placed cells."""
    x, y = cell
    for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
        neighbour = (x + dx, y + dy)
        if neighbour != tail and neighbour in placed:
            return False
    return True


def synthesize_path(
    rng: SeededRandom,
    bounds: tuple[int, int, int, int],
    length: int,
    left_to_right: bool,
    turn_probability: float,
    work_budget: int,
) -> list[Position] | None:
    """Walk ``length`` cells inside ``bounds`` = (left, top, right, bottom).

    Starts at the top corner on the chosen side, heading inward. Returns None
    when the branch stack empties or the work budget runs out.
    """
    left, top, right, bottom = bounds
    start = (left, top) if left_to_right else (right, top)
    heading = Direction.RIGHT if left_to_right else Direction.LEFT

    path: list[Position] = [start]
    placed: set[Position] = {start}
    branches: list[list[Direction]] = [_branch_order(rng, heading, turn_probability)]
    work = 0

    while len(path) < length:
        work += 1
        if work > work_budget:
            return None
        options = branches[-1]
        if not options:
            placed.discard(path.pop())
            branches.pop()
            if not path:
                return None
            continue

        direction = options.pop()
        tail = path[-1]
        dx, dy = direction.delta
        cell = (tail[0] + dx, tail[1] + dy)
        if not (left <= cell[0] <= right and top <= cell[1] <= bottom):
            continue
        if cell in placed or not _keeps_clearance(cell, tail, placed):
            continue

        path.append(cell)
        placed.add(cell)
        branches.append(_branch_order(rng, direction, turn_probability))

    return path


def _step_direction(start: Position, end: Position) -> Direction:
    delta = (end[0] - start[0], end[1] - start[1])
    for direction in Direction:
        if direction.delta == delta:
            return direction
    raise ValueError(f"Non-adjacent path step: {start} -> {end}.")


def designed_solution(path: list[Position], difficulty: int) -> tuple[Direction, ...]:
    """Moves that walk from the spawn (``path[difficulty]``) back to the goal."""
    return tuple(
        _step_direction(path[index], path[index - 1]) for index in range(difficulty, 0, -1)
    )


# ---------------------------------------------------------------------------
# Candidate assembly
# ---------------------------------------------------------------------------


def _draw_geometry(config: GeneratorConfig, feasibility: Feasibility, rng: SeededRandom) -> LaneGeometry:
    rows_per_lane = rng.randint(feasibility.min_rows_per_lane, feasibility.max_rows_per_lane)
    lane_height = rows_per_lane * 2 - 1
    used_rows = config.players * lane_height + (config.players - 1)
    free_rows = (config.height - 2) - used_rows
    top_padding = 0 if free_rows == 0 else rng.randint(0, free_rows)
    return LaneGeometry(
        rows_per_lane=rows_per_lane,
        lane_height=lane_height,
        top_padding=top_padding,
        left_to_right=rng.coin(),
    )


def _assemble_grid(
    config: GeneratorConfig,
    geometry: LaneGeometry,
    path: list[Position],
    rng: SeededRandom,
) -> list[list[str]]:
    grid = [[WALL] * config.width for _ in range(config.height)]
    path_cells: set[Position] = set()
    for lane in range(config.players):
        offset = geometry.lane_offset(lane)
        for x, y in path:
            grid[y + offset][x] = FLOOR
            path_cells.add((x, y + offset))
        goal_x, goal_y = path[0]
        spawn_x, spawn_y = path[config.difficulty]
        grid[goal_y + offset][goal_x] = GOAL
        grid[spawn_y + offset][spawn_x] = PLAYER_SPAWN

    # Lava only replaces interior walls that touch the path (8-neighbourhood).
    for y in range(1, config.height - 1):
        for x in range(1, config.width - 1):
            if grid[y][x] != WALL:
                continue
            touches_path = any(
                (x + dx, y + dy) in path_cells for dx in (-1, 0, 1) for dy in (-1, 0, 1)
            )
            if touches_path and rng.coin(config.lava_probability):
                grid[y][x] = LAVA
    return grid


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_level(config: GeneratorConfig) -> GeneratedLevel:
    """Generate a level whose verified minimum solution is ``config.difficulty`` moves.

    Raises:
        InfeasibleLayoutError: if no lane layout can hold the requested path.
        GenerationExhaustedError: if every attempt was discarded.
    """
    feasibility = check_feasibility(
        config.players, config.difficulty, config.width, config.height
    )
    if not feasibility.feasible:
        raise InfeasibleLayoutError(
            f"No layout can satisfy players={config.players}, "
            f"difficulty={config.difficulty}, size={config.width}x{config.height}."
        )

    path_length = config.difficulty + 1
    for attempt in range(config.max_attempts):
        rng = SeededRandom(f"{config.seed}|attempt:{attempt}")
        geometry = _draw_geometry(config, feasibility, rng)
        top = geometry.first_lane_top
        bounds = (1, top, config.width - 2, top + geometry.lane_height - 1)
        path = synthesize_path(
            rng,
            bounds,
            path_length,
            geometry.left_to_right,
            config.turn_probability,
            config.path_work_budget,
        )
        if path is None:
            logger.debug("attempt %s: no path of %s cells in lane", attempt, path_length)
            continue

        grid = _assemble_grid(config, geometry, path, rng)
        level_text = "\n".join("".join(row) for row in grid)
        level = parse_level_text(f"generated-{config.seed}-{attempt}", level_text)
        if len(level.player_spawns) != config.players:
            logger.debug(
                "attempt %s: %s spawns, expected %s",
                attempt,
                len(level.player_spawns),
                config.players,
            )
            continue

        solved = solve(level, max_moves=config.difficulty, max_visited=config.max_visited)
        if solved.min_moves != config.difficulty or solved.move_path is None:
            logger.debug(
                "attempt %s: solver reported %s moves (truncated=%s)",
                attempt,
                solved.min_moves,
                solved.truncated,
            )
            continue

        logger.info(
            "Generated seed=%r difficulty=%s on attempt %s (%s states visited)",
            config.seed,
            config.difficulty,
            attempt,
            solved.visited_count,
        )
        return GeneratedLevel(
            seed=config.seed,
            attempt=attempt,
            width=config.width,
            height=config.height,
            players=config.players,
            difficulty=config.difficulty,
            rows_per_lane=geometry.rows_per_lane,
            level_text=level_text,
            min_moves=solved.min_moves,
            solver_path=tuple(d.value for d in solved.move_path),
            designed_path=tuple(d.value for d in designed_solution(path, config.difficulty)),
            visited_count=solved.visited_count,
        )

    raise GenerationExhaustedError(
        f"Unable to generate a solvable level after {config.max_attempts} attempts "
        f"for difficulty {config.difficulty} (seed {config.seed!r})."
    )


def generate(
    seed: str,
    player_count: int,
    difficulty: int,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    max_attempts: int = DEFAULT_ATTEMPTS,
) -> GeneratedLevel:
    """Keyword-friendly wrapper around ``generate_level``."""
    return generate_level(
        GeneratorConfig(
            seed=seed,
            players=player_count,
            difficulty=difficulty,
            width=width,
            height=height,
            max_attempts=max_attempts,
        )
    )
