"""Deterministic turn engine.

``advance`` resolves one turn and returns a new ``GameState``; the input state
is never mutated, so callers (the solver in particular) may keep any number of
earlier states alive without aliasing.

Turn order is load-bearing: restart, passive ticks, the carried-over overlap
check, the player phase in spawn-id order, then the enemy phase in spawn-id
order. A goal completion or a reset ends the turn immediately.

The grid is split into two layers: the level's immutable base grid and a
per-state ``overlay`` holding the cells enemies have rewritten. Reads merge the
overlay over the base.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from lockstep.config.constants import GOAL, LAVA, PATH_MODULUS, TRAIL_MODULUS
from lockstep.domain.level import Level, Position
from lockstep.domain.tiles import is_walkable, tile_value


class Direction(Enum):
    """Directional input; definition order is the solver's move order."""

    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def delta(self) -> tuple[int, int]:
        return _DIRECTION_DELTAS[self]


_DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


class GameStatus(Enum):
    PLAYING = "playing"
    COMPLETE = "complete"


class TurnEvent(Enum):
    """Why the last transition produced the state it did."""

    NONE = "none"
    LEVEL_RESET = "level-reset"
    LEVEL_ADVANCED = "level-advanced"
    GAME_COMPLETE = "game-complete"
    TURN_PROCESSED = "turn-processed"


@dataclass(frozen=True)
class Actor:
    """A player or enemy token; ids follow spawn order within a level."""

    id: int
    x: int
    y: int


@dataclass(frozen=True)
class GameState:
    """Complete simulation state for one point in a play session."""

    levels: tuple[Level, ...]
    level_index: int
    players: tuple[Actor, ...]
    enemies: tuple[Actor, ...]
    total_players: int
    overlay: Mapping[Position, str] = field(default_factory=dict)
    players_done: int = 0
    moves: int = 0
    tick: int = 0
    status: GameStatus = GameStatus.PLAYING
    last_event: TurnEvent = TurnEvent.NONE

    @property
    def level(self) -> Level:
        return self.levels[self.level_index]

    @property
    def level_id(self) -> str:
        return self.level.level_id

    def tile(self, x: int, y: int) -> str | None:
        """Current tile at (x, y) with enemy rewrites applied; None when off-grid."""
        base = self.level.tile(x, y)
        if base is None:
            return None
        return self.overlay.get((x, y), base)

    def grid_rows(self) -> tuple[tuple[str, ...], ...]:
        """Merged working grid, row by row."""
        level = self.level
        return tuple(
            tuple(self.overlay.get((x, y), level.grid[y][x]) for x in range(level.width))
            for y in range(level.height)
        )


# ---------------------------------------------------------------------------
# Level lifecycle
# ---------------------------------------------------------------------------


def _spawn(levels: tuple[Level, ...], level_index: int, event: TurnEvent) -> GameState:
    index = max(0, min(level_index, len(levels) - 1))
    level = levels[index]
    players = tuple(Actor(id=i, x=x, y=y) for i, (x, y) in enumerate(level.player_spawns))
    enemies = tuple(Actor(id=i, x=x, y=y) for i, (x, y) in enumerate(level.enemy_spawns))
    return GameState(
        levels=levels,
        level_index=index,
        players=players,
        enemies=enemies,
        total_players=len(players),
        overlay={},
        last_event=event,
    )


def create_initial_state(levels: Sequence[Level], start_level_index: int = 0) -> GameState:
    """Spawn the first (or requested) level of a level sequence.

    Raises:
        ValueError: if ``levels`` is empty.
    """
    if not levels:
        raise ValueError("At least one parsed level is required.")
    return _spawn(tuple(levels), start_level_index, TurnEvent.NONE)


def restart_level(state: GameState) -> GameState:
    return _spawn(state.levels, state.level_index, TurnEvent.LEVEL_RESET)


def set_level(state: GameState, level_index: int) -> GameState:
    """Jump to a level; out-of-range indices are clamped to the sequence."""
    return _spawn(state.levels, level_index, TurnEvent.NONE)


# ---------------------------------------------------------------------------
# Turn resolution
# ---------------------------------------------------------------------------


class _PhaseOutcome(Enum):
    CONTINUE = "continue"
    RESET = "reset"
    CLEARED = "cleared"


@dataclass
class _WorkingTurn:
    """Private mutable copy of a state while one turn is resolved."""

    level: Level
    overlay: dict[Position, str]
    players: list[Actor]
    enemies: list[Actor]
    players_done: int
    total_players: int

    @classmethod
    def from_state(cls, state: GameState) -> _WorkingTurn:
        return cls(
            level=state.level,
            overlay=dict(state.overlay),
            players=list(state.players),
            enemies=list(state.enemies),
            players_done=state.players_done,
            total_players=state.total_players,
        )

    def tile(self, x: int, y: int) -> str | None:
        base = self.level.tile(x, y)
        if base is None:
            return None
        return self.overlay.get((x, y), base)

    def player_index(self, player_id: int) -> int | None:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return None

    def player_at(self, x: int, y: int, ignore_id: int) -> bool:
        return any(p.id != ignore_id and p.x == x and p.y == y for p in self.players)

    def enemy_at(self, x: int, y: int) -> bool:
        return any(e.x == x and e.y == y for e in self.enemies)

    def enemy_touch(self) -> bool:
        return any(self.enemy_at(p.x, p.y) for p in self.players)


def _run_player_phase(turn: _WorkingTurn, direction: Direction) -> _PhaseOutcome:
    dx, dy = direction.delta
    for player_id in [player.id for player in turn.players]:
        index = turn.player_index(player_id)
        if index is None:
            continue
        player = turn.players[index]
        target_x, target_y = player.x + dx, player.y + dy
        target = turn.tile(target_x, target_y)

        if target is None:
            # Walking off the grid removes the player from play.
            del turn.players[index]
            continue

        if is_walkable(target) and not turn.player_at(target_x, target_y, player.id):
            player = replace(player, x=target_x, y=target_y)
            turn.players[index] = player
        elif target == GOAL:
            turn.players_done += 1
            del turn.players[index]
            if turn.players_done >= turn.total_players:
                return _PhaseOutcome.CLEARED
            continue
        elif target == LAVA:
            return _PhaseOutcome.RESET

        if turn.enemy_at(player.x, player.y):
            return _PhaseOutcome.RESET
    return _PhaseOutcome.CONTINUE


def _enemy_step(turn: _WorkingTurn, enemy: Actor) -> Actor:
    """Move one enemy to the first 3x3 neighbour holding its value plus one."""
    current = tile_value(turn.tile(enemy.x, enemy.y))
    if current is None:
        return enemy

    for row in range(enemy.y - 1, enemy.y + 2):
        for col in range(enemy.x - 1, enemy.x + 2):
            candidate = tile_value(turn.tile(col, row))
            if candidate is not None and candidate - 1 == current:
                turn.overlay[(enemy.x, enemy.y)] = str(TRAIL_MODULUS - current)
                return replace(enemy, x=col, y=row)
            # The wrap is checked after each scanned cell, not once before the scan.
            if current == PATH_MODULUS:
                current = 1
    return enemy


def _run_enemy_phase(turn: _WorkingTurn) -> _PhaseOutcome:
    if turn.enemy_touch():
        return _PhaseOutcome.RESET
    for index, enemy in enumerate(turn.enemies):
        turn.enemies[index] = _enemy_step(turn, enemy)
        if turn.enemy_touch():
            return _PhaseOutcome.RESET
    if turn.enemy_touch():
        return _PhaseOutcome.RESET
    return _PhaseOutcome.CONTINUE


def _finish_level(state: GameState, turn: _WorkingTurn) -> GameState:
    next_index = state.level_index + 1
    if next_index >= len(state.levels):
        return replace(
            state,
            overlay=turn.overlay,
            players=(),
            enemies=(),
            players_done=turn.players_done,
            moves=state.moves + 1,
            tick=state.tick + 1,
            status=GameStatus.COMPLETE,
            last_event=TurnEvent.GAME_COMPLETE,
        )
    return _spawn(state.levels, next_index, TurnEvent.LEVEL_ADVANCED)


def advance(
    state: GameState,
    direction: Direction | str | None = None,
    restart: bool = False,
) -> GameState:
    """Resolve one turn and return the resulting state.

    Gameplay outcomes (falling off the grid, lava, enemy contact, goals) are
    reported through ``last_event``; this function does not raise for them.
    """
    if restart:
        return restart_level(state)
    if state.status is GameStatus.COMPLETE:
        return replace(state, last_event=TurnEvent.NONE)
    if direction is None:
        return replace(state, last_event=TurnEvent.NONE)

    direction = Direction(direction)
    turn = _WorkingTurn.from_state(state)

    # An overlap carried over from the previous state resets before anyone moves.
    if turn.enemy_touch():
        return restart_level(state)

    outcome = _run_player_phase(turn, direction)
    if outcome is _PhaseOutcome.RESET:
        return restart_level(state)
    if outcome is _PhaseOutcome.CLEARED:
        return _finish_level(state, turn)

    if _run_enemy_phase(turn) is _PhaseOutcome.RESET:
        return restart_level(state)

    return replace(
        state,
        overlay=turn.overlay,
        players=tuple(turn.players),
        enemies=tuple(turn.enemies),
        players_done=turn.players_done,
        moves=state.moves + 1,
        tick=state.tick + 1,
        last_event=TurnEvent.TURN_PROCESSED,
    )
