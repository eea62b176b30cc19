"""Tests for lockstep.io paths and writers."""

from __future__ import annotations

import json
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from lockstep.io.paths import (
    batch_summary_path,
    generation_runs_path,
    level_file_path,
    resolve_within_base,
)
from lockstep.io.persistence import (
    read_generation_runs,
    write_generation_runs,
    write_json,
    write_level_text,
)
from lockstep.io.schemas import GENERATION_RUNS_SCHEMA, GENERATION_RUNS_SCHEMA_VERSION


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {name: None for name in GENERATION_RUNS_SCHEMA.names}
    row.update(
        schema_version=GENERATION_RUNS_SCHEMA_VERSION,
        seed="a",
        difficulty=3,
        players=1,
        width=25,
        height=16,
        status="ok",
    )
    row.update(overrides)
    return row


def test_output_layout(tmp_path: Path) -> None:
    assert generation_runs_path(tmp_path) == tmp_path / "logs" / "generation_runs.parquet"
    assert batch_summary_path(tmp_path) == tmp_path / "logs" / "batch_summary.json"


def test_level_file_path_sanitizes_seed(tmp_path: Path) -> None:
    path = level_file_path(tmp_path, "../evil seed", 7)
    assert path.parent == (tmp_path / "levels").resolve()
    assert path.name == ".._evil_seed_d7.txt"


def test_resolve_within_base_rejects_escape(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="escapes base_dir"):
        resolve_within_base(Path("../outside.txt"), tmp_path)


def test_generation_runs_round_trip(tmp_path: Path) -> None:
    rows = [_row(min_moves=3, attempt=0), _row(seed="b", status="infeasible", error="nope")]
    path = write_generation_runs(rows, tmp_path / "logs" / "runs.parquet")
    table = pq.read_table(path)
    assert table.schema.equals(GENERATION_RUNS_SCHEMA)
    loaded = read_generation_runs(path)
    assert [row["status"] for row in loaded] == ["ok", "infeasible"]
    assert loaded[1]["min_moves"] is None


def test_write_level_text_adds_newline(tmp_path: Path) -> None:
    path = write_level_text("###\n#P#\n###", tmp_path / "levels" / "a.txt")
    assert path.read_text(encoding="utf-8") == "###\n#P#\n###\n"


def test_write_json(tmp_path: Path) -> None:
    path = write_json({"generated": 2}, tmp_path / "summary.json")
    assert json.loads(path.read_text()) == {"generated": 2}
