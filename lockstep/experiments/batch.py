"""Batch generation over a grid of seeds and difficulties."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import numpy as np

from lockstep.config.types import BatchConfig
from lockstep.generation.generator import (
    GenerationExhaustedError,
    InfeasibleLayoutError,
    generate_level,
)
from lockstep.io.paths import batch_summary_path, generation_runs_path, level_file_path
from lockstep.io.persistence import write_generation_runs, write_json, write_level_text
from lockstep.io.schemas import (
    GENERATION_RUNS_SCHEMA_VERSION,
    STATUS_EXHAUSTED,
    STATUS_INFEASIBLE,
    STATUS_OK,
)
from lockstep.simulation.replay import format_replay

logger = logging.getLogger(__name__)

RunRow = dict[str, int | str | None]


def _empty_row(config: BatchConfig, seed: str, difficulty: int) -> RunRow:
    return {
        "schema_version": GENERATION_RUNS_SCHEMA_VERSION,
        "seed": seed,
        "difficulty": difficulty,
        "players": config.players,
        "width": config.width,
        "height": config.height,
        "status": None,
        "attempt": None,
        "rows_per_lane": None,
        "min_moves": None,
        "visited_count": None,
        "solver_replay": None,
        "level_digest": None,
        "level_path": None,
        "error": None,
    }


def _percentiles(values: list[int]) -> dict[str, float | None]:
    if not values:
        return {"mean": None, "p50": None, "max": None}
    arr = np.asarray(values, dtype=np.float64)
    return {
        "mean": float(np.mean(arr)),
        "p50": float(np.percentile(arr, 50)),
        "max": float(np.max(arr)),
    }


def summarize_batch(rows: list[RunRow]) -> dict[str, object]:
    """Aggregate run rows into a JSON-ready summary."""
    ok_rows = [row for row in rows if row["status"] == STATUS_OK]
    visited = [int(row["visited_count"]) for row in ok_rows]  # type: ignore[arg-type]
    attempts = [int(row["attempt"]) + 1 for row in ok_rows]  # type: ignore[operator]
    return {
        "levels_requested": len(rows),
        "generated": len(ok_rows),
        "infeasible": sum(1 for row in rows if row["status"] == STATUS_INFEASIBLE),
        "exhausted": sum(1 for row in rows if row["status"] == STATUS_EXHAUSTED),
        "success_rate": len(ok_rows) / len(rows) if rows else 0.0,
        "visited_states": _percentiles(visited),
        "attempts_used": _percentiles(attempts),
    }


def run_generation_batch(config: BatchConfig) -> list[RunRow]:
    """Generate one level per (seed, difficulty) pair and persist the artifacts.

    Infeasible or exhausted cells are recorded as rows with an ``error``
    message instead of aborting the batch.
    """
    out_dir = Path(config.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    rows: list[RunRow] = []
    for seed in config.seeds:
        for difficulty in config.difficulties:
            row = _empty_row(config, seed, difficulty)
            try:
                generated = generate_level(config.generator_config(seed, difficulty))
            except InfeasibleLayoutError as exc:
                row["status"] = STATUS_INFEASIBLE
                row["error"] = str(exc)
            except GenerationExhaustedError as exc:
                logger.warning("Batch cell seed=%r difficulty=%s exhausted", seed, difficulty)
                row["status"] = STATUS_EXHAUSTED
                row["error"] = str(exc)
            else:
                level_path = write_level_text(
                    generated.level_text, level_file_path(out_dir, seed, difficulty)
                )
                row.update(
                    {
                        "status": STATUS_OK,
                        "attempt": generated.attempt,
                        "rows_per_lane": generated.rows_per_lane,
                        "min_moves": generated.min_moves,
                        "visited_count": generated.visited_count,
                        "solver_replay": format_replay(generated.solver_path),
                        "level_digest": hashlib.sha256(
                            generated.level_text.encode()
                        ).hexdigest(),
                        "level_path": str(level_path),
                    }
                )
            rows.append(row)

    write_generation_runs(rows, generation_runs_path(out_dir))
    write_json(summarize_batch(rows), batch_summary_path(out_dir))
    return rows
