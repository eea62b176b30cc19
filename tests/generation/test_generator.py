"""Tests for lockstep.generation.generator module."""

from __future__ import annotations

import pytest

from lockstep.config.types import GeneratorConfig
from lockstep.domain.level import parse_level_text
from lockstep.generation.generator import (
    GenerationExhaustedError,
    InfeasibleLayoutError,
    check_feasibility,
    designed_solution,
    generate,
    generate_level,
    synthesize_path,
)
from lockstep.generation.rng import SeededRandom
from lockstep.search.solver import solve
from lockstep.simulation.replay import format_replay, verify_replay


class TestFeasibility:
    def test_roomy_board_is_feasible(self) -> None:
        feasibility = check_feasibility(players=1, difficulty=10, width=25, height=16)
        assert feasibility.feasible
        assert feasibility.min_rows_per_lane == 1
        assert feasibility.max_rows_per_lane == 7
        assert feasibility.max_lane_height == 14
        assert feasibility.max_path_cells == 7 * 23 + 6

    def test_crowded_board_is_infeasible(self) -> None:
        feasibility = check_feasibility(players=4, difficulty=80, width=25, height=16)
        assert feasibility.min_rows_per_lane == 4
        assert feasibility.max_rows_per_lane == 1
        assert not feasibility.feasible

    def test_generate_rejects_infeasible_request(self) -> None:
        with pytest.raises(InfeasibleLayoutError, match="No layout can satisfy"):
            generate("crowded", 4, 80)

    def test_infeasible_error_is_value_error(self) -> None:
        assert issubclass(InfeasibleLayoutError, ValueError)


class TestSynthesizePath:
    def test_path_is_simple_and_connected(self) -> None:
        bounds = (1, 1, 10, 5)
        path = synthesize_path(
            SeededRandom("walk"),
            bounds,
            length=12,
            left_to_right=True,
            turn_probability=0.15,
            work_budget=20_000,
        )
        assert path is not None
        assert len(path) == 12
        assert path[0] == (1, 1)
        assert len(set(path)) == len(path)
        for (x0, y0), (x1, y1) in zip(path, path[1:]):
            assert abs(x0 - x1) + abs(y0 - y1) == 1
        for x, y in path:
            assert 1 <= x <= 10 and 1 <= y <= 5

    def test_path_never_touches_itself(self) -> None:
        path = synthesize_path(
            SeededRandom("clearance"),
            (1, 1, 10, 7),
            length=18,
            left_to_right=False,
            turn_probability=0.3,
            work_budget=20_000,
        )
        assert path is not None
        assert path[0] == (10, 1)
        index = {cell: i for i, cell in enumerate(path)}
        for i, (x, y) in enumerate(path):
            for neighbour in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
                if neighbour in index:
                    assert abs(index[neighbour] - i) == 1

    def test_work_budget_exhaustion_returns_none(self) -> None:
        path = synthesize_path(
            SeededRandom("tiny"),
            (1, 1, 10, 5),
            length=5,
            left_to_right=True,
            turn_probability=0.15,
            work_budget=1,
        )
        assert path is None

    def test_designed_solution_walks_back_to_start(self) -> None:
        path = [(1, 1), (2, 1), (2, 2)]
        moves = designed_solution(path, 2)
        assert format_replay(moves) == "ul"


class TestGenerate:
    def test_single_player_level_verified(self) -> None:
        generated = generate("alpha", 1, 8)
        assert generated.min_moves == 8
        assert len(generated.solver_path) == 8
        assert generated.level_text.count("P") == 1
        assert generated.level_text.count("!") == 1
        assert verify_replay(generated.level_text, format_replay(generated.solver_path)).ok
        assert verify_replay(generated.level_text, format_replay(generated.designed_path)).ok

    def test_independent_solve_agrees(self) -> None:
        generated = generate("agree", 1, 12)
        result = solve(parse_level_text("check", generated.level_text))
        assert result.min_moves == 12

    def test_generation_is_deterministic(self) -> None:
        assert generate("repeat", 2, 6) == generate("repeat", 2, 6)

    def test_two_player_default_board_example(self) -> None:
        first = generate(seed="s1", player_count=2, difficulty=24, width=25, height=16)
        second = generate(seed="s1", player_count=2, difficulty=24, width=25, height=16)
        assert first.level_text == second.level_text
        assert first.solver_path == second.solver_path
        assert first.level_text.count("P") == 2
        result = solve(parse_level_text("s1", first.level_text))
        assert result.min_moves == 24
        assert len(first.solver_path) == 24

    def test_multi_player_lanes(self) -> None:
        generated = generate("team", 3, 6)
        assert generated.players == 3
        assert generated.level_text.count("P") == 3
        assert generated.level_text.count("!") == 3
        assert verify_replay(generated.level_text, format_replay(generated.solver_path)).ok

    def test_custom_dimensions_and_border(self) -> None:
        generated = generate("sized", 1, 5, width=12, height=9)
        rows = generated.level_text.split("\n")
        assert len(rows) == 9
        assert all(len(row) == 12 for row in rows)
        assert set(rows[0]) == {"#"}
        assert set(rows[-1]) == {"#"}
        assert all(row[0] == "#" and row[-1] == "#" for row in rows)

    def test_no_enemies_are_placed(self) -> None:
        generated = generate("calm", 1, 10)
        assert parse_level_text("calm", generated.level_text).enemy_spawns == ()

    def test_seed_length_limit(self) -> None:
        with pytest.raises(ValueError, match="shorter than 32"):
            generate("s" * 32, 1, 5)

    @pytest.mark.parametrize(
        ("players", "difficulty"),
        [(0, 5), (129, 5), (1, 0), (1, 101)],
    )
    def test_out_of_range_parameters(self, players: int, difficulty: int) -> None:
        with pytest.raises(ValueError):
            generate("bounds", players, difficulty)

    def test_exhaustion_raises(self) -> None:
        config = GeneratorConfig(
            seed="starved", players=1, difficulty=5, max_attempts=2, path_work_budget=1
        )
        with pytest.raises(GenerationExhaustedError, match="after 2 attempts"):
            generate_level(config)

    def test_to_dict_is_json_ready(self) -> None:
        payload = generate("dict", 1, 4).to_dict()
        assert payload["difficulty"] == 4
        assert isinstance(payload["solver_path"], list)
        assert isinstance(payload["designed_path"], list)
