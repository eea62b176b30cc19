"""Parquet, JSON, and level-text writers for generation outputs."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from lockstep.io.schemas import GENERATION_RUNS_SCHEMA


def write_generation_runs(rows: Sequence[Mapping[str, object]], path: Path) -> Path:
    """Write generation run rows to Parquet using the fixed runs schema."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pylist(list(rows), schema=GENERATION_RUNS_SCHEMA)
    pq.write_table(table, path)
    return path


def read_generation_runs(path: Path) -> list[dict[str, object]]:
    return pq.read_table(path).to_pylist()


def write_level_text(level_text: str, path: Path) -> Path:
    """Write level text with a single trailing newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{level_text}\n", encoding="utf-8")
    return path


def write_json(payload: Mapping[str, object], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2))
    return path
