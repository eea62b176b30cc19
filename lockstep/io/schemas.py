"""Parquet schema definitions for generation artifacts.

Every module that writes or reads batch outputs works against the column
contracts defined here.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

GENERATION_RUNS_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Generation runs
# ---------------------------------------------------------------------------

GENERATION_RUNS_SCHEMA = pa.schema(
    [
        ("schema_version", pa.int64()),
        ("seed", pa.string()),
        ("difficulty", pa.int64()),
        ("players", pa.int64()),
        ("width", pa.int64()),
        ("height", pa.int64()),
        ("status", pa.string()),
        ("attempt", pa.int64()),
        ("rows_per_lane", pa.int64()),
        ("min_moves", pa.int64()),
        ("visited_count", pa.int64()),
        ("solver_replay", pa.string()),
        ("level_digest", pa.string()),
        ("level_path", pa.string()),
        ("error", pa.string()),
    ]
)

STATUS_OK = "ok"
STATUS_INFEASIBLE = "infeasible"
STATUS_EXHAUSTED = "exhausted"

GENERATION_STATUSES: tuple[str, ...] = (STATUS_OK, STATUS_INFEASIBLE, STATUS_EXHAUSTED)
"""Values of the ``status`` column."""
