"""Tests for lockstep.domain.engine module."""

from __future__ import annotations

from dataclasses import replace

import pytest

from lockstep.domain.engine import (
    Actor,
    Direction,
    GameStatus,
    TurnEvent,
    advance,
    create_initial_state,
    restart_level,
    set_level,
)
from lockstep.domain.level import parse_level_text

ONE_STEP = "#####\n#P!##\n#####"


def _state(*texts: str):
    levels = [parse_level_text(f"level-{i}", text) for i, text in enumerate(texts)]
    return create_initial_state(levels)


class TestLifecycle:
    def test_initial_state_spawns_actors(self) -> None:
        state = _state("#####\n#P1 #\n#####")
        assert [(p.id, p.x, p.y) for p in state.players] == [(0, 1, 1)]
        assert [(e.id, e.x, e.y) for e in state.enemies] == [(0, 2, 1)]
        assert state.total_players == 1
        assert state.status is GameStatus.PLAYING
        assert state.last_event is TurnEvent.NONE

    def test_empty_level_list_rejected(self) -> None:
        with pytest.raises(ValueError, match="At least one parsed level"):
            create_initial_state([])

    def test_set_level_clamps_index(self) -> None:
        state = _state(ONE_STEP, ONE_STEP)
        assert set_level(state, 5).level_index == 1
        assert set_level(state, -3).level_index == 0
        assert set_level(state, 5).last_event is TurnEvent.NONE

    def test_restart_level_respawns(self) -> None:
        state = advance(_state("#####\n#P ##\n#####"), Direction.RIGHT)
        restarted = restart_level(state)
        assert (restarted.players[0].x, restarted.players[0].y) == (1, 1)
        assert restarted.moves == 0
        assert restarted.last_event is TurnEvent.LEVEL_RESET


class TestAdvance:
    def test_no_direction_is_a_no_op(self) -> None:
        state = _state(ONE_STEP)
        after = advance(state)
        assert after.players == state.players
        assert after.moves == 0
        assert after.last_event is TurnEvent.NONE

    def test_restart_flag_wins_over_direction(self) -> None:
        state = advance(_state("#####\n#P ##\n#####"), Direction.RIGHT)
        after = advance(state, Direction.LEFT, restart=True)
        assert after.last_event is TurnEvent.LEVEL_RESET
        assert (after.players[0].x, after.players[0].y) == (1, 1)

    def test_wall_blocks_but_turn_still_counts(self) -> None:
        state = advance(_state("#####\n#P ##\n#####"), Direction.LEFT)
        assert (state.players[0].x, state.players[0].y) == (1, 1)
        assert state.moves == 1
        assert state.tick == 1
        assert state.last_event is TurnEvent.TURN_PROCESSED

    def test_string_directions_accepted(self) -> None:
        state = advance(_state("#####\n#P ##\n#####"), "right")
        assert (state.players[0].x, state.players[0].y) == (2, 1)

    def test_unknown_direction_rejected(self) -> None:
        with pytest.raises(ValueError):
            advance(_state(ONE_STEP), "north")

    def test_input_state_not_mutated(self) -> None:
        state = _state("#####\n#P ##\n#####")
        advance(state, Direction.RIGHT)
        assert (state.players[0].x, state.players[0].y) == (1, 1)
        assert state.moves == 0

    def test_goal_on_last_level_completes_game(self) -> None:
        state = advance(_state(ONE_STEP), Direction.RIGHT)
        assert state.status is GameStatus.COMPLETE
        assert state.last_event is TurnEvent.GAME_COMPLETE
        assert state.players == ()
        assert state.players_done == 1
        assert state.moves == 1

    def test_complete_game_ignores_input(self) -> None:
        state = advance(_state(ONE_STEP), Direction.RIGHT)
        after = advance(state, Direction.LEFT)
        assert after.status is GameStatus.COMPLETE
        assert after.last_event is TurnEvent.NONE
        assert after.moves == 1

    def test_goal_with_more_levels_advances(self) -> None:
        state = advance(_state(ONE_STEP, "#####\n# P!#\n#####"), Direction.RIGHT)
        assert state.last_event is TurnEvent.LEVEL_ADVANCED
        assert state.level_index == 1
        assert (state.players[0].x, state.players[0].y) == (2, 1)
        assert state.moves == 0

    def test_lava_resets_level(self) -> None:
        state = advance(_state("#####\n#Px!#\n#####"), Direction.RIGHT)
        assert state.last_event is TurnEvent.LEVEL_RESET
        assert (state.players[0].x, state.players[0].y) == (1, 1)
        assert state.moves == 0

    def test_walking_off_grid_removes_player(self) -> None:
        state = advance(_state("P !\n###"), Direction.LEFT)
        assert state.players == ()
        assert state.last_event is TurnEvent.TURN_PROCESSED
        assert state.status is GameStatus.PLAYING

    def test_players_resolve_in_spawn_order(self) -> None:
        state = _state("######\n#PP !#\n######")
        first = advance(state, Direction.RIGHT)
        # Player 0 is blocked by player 1, which has not moved yet.
        assert [(p.x, p.y) for p in first.players] == [(1, 1), (3, 1)]

        second = advance(first, Direction.RIGHT)
        assert second.players_done == 1
        assert [(p.id, p.x, p.y) for p in second.players] == [(0, 2, 1)]
        assert second.status is GameStatus.PLAYING

    def test_all_players_on_goal_clears(self) -> None:
        state = advance(_state("#####\n#P!##\n#####\n#P!##\n#####"), Direction.RIGHT)
        assert state.status is GameStatus.COMPLETE
        assert state.players_done == 2


class TestEnemies:
    def test_enemy_follows_path_and_leaves_trail(self) -> None:
        state = _state("#####\n#123#\n#P  #\n#####")
        after = advance(state, Direction.RIGHT)
        assert after.last_event is TurnEvent.TURN_PROCESSED
        assert [(e.x, e.y) for e in after.enemies] == [(2, 1)]
        assert after.tile(1, 1) == "17"
        assert after.grid_rows()[1] == ("#", "17", "2", "3", "#")
        # The immutable base grid keeps the original tile.
        assert after.level.tile(1, 1) == "1"

        later = advance(after, Direction.DOWN)
        assert [(e.x, e.y) for e in later.enemies] == [(3, 1)]
        assert later.tile(2, 1) == "16"

    def test_enemy_without_next_value_stays(self) -> None:
        state = advance(_state("#####\n#1  #\n#P  #\n#####"), Direction.RIGHT)
        assert [(e.x, e.y) for e in state.enemies] == [(1, 1)]
        assert state.tile(1, 1) == "1"

    def test_player_stepping_onto_enemy_resets(self) -> None:
        state = advance(_state("######\n#P12 #\n######"), Direction.RIGHT)
        assert state.last_event is TurnEvent.LEVEL_RESET
        assert state.moves == 0

    def test_enemy_stepping_onto_player_resets(self) -> None:
        state = advance(_state("#####\n#12 #\n# P #\n#####"), Direction.UP)
        assert state.last_event is TurnEvent.LEVEL_RESET
        assert [(e.x, e.y) for e in state.enemies] == [(1, 1)]

    @pytest.mark.parametrize("direction", list(Direction))
    def test_overlap_at_turn_start_resets_before_moving(self, direction: Direction) -> None:
        state = _state("#####\n#1  #\n#P  #\n#####")
        enemy = state.enemies[0]
        overlapping = replace(state, players=(Actor(0, enemy.x, enemy.y),))
        after = advance(overlapping, direction)
        assert after.last_event is TurnEvent.LEVEL_RESET
        assert (after.players[0].x, after.players[0].y) == (1, 2)
        assert after.moves == 0


class TestEnemyWrap:
    """Enemy patrol values wrap from 17 back to 1 partway through the scan."""

    LEVEL = "#####\n#   #\n# 12#\n#P  #\n#####"

    def test_wrap_applies_after_first_scanned_cell(self) -> None:
        state = _state(self.LEVEL)
        state = replace(state, overlay={(2, 2): "17"})
        after = advance(state, Direction.LEFT)
        assert after.last_event is TurnEvent.TURN_PROCESSED
        assert [(e.x, e.y) for e in after.enemies] == [(3, 2)]
        assert after.tile(2, 2) == "17"

    def test_top_left_eighteen_matches_before_wrap(self) -> None:
        state = _state(self.LEVEL)
        state = replace(state, overlay={(2, 2): "17", (1, 1): "18"})
        after = advance(state, Direction.LEFT)
        assert after.last_event is TurnEvent.TURN_PROCESSED
        assert [(e.x, e.y) for e in after.enemies] == [(1, 1)]
        assert after.tile(2, 2) == "1"

    def test_eighteen_elsewhere_is_missed_after_wrap(self) -> None:
        state = _state("#####\n#   #\n# 1 #\n#P 8#\n#####")
        state = replace(state, overlay={(2, 2): "17", (3, 3): "18"})
        after = advance(state, Direction.UP)
        assert [(e.x, e.y) for e in after.enemies] == [(2, 2)]
        assert after.tile(2, 2) == "17"
