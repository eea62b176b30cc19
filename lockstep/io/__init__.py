"""I/O layer: output paths, Parquet schemas, and writers."""

from lockstep.io.paths import (
    batch_summary_path,
    generation_runs_path,
    level_file_path,
    levels_dir,
    logs_dir,
    resolve_within_base,
)
from lockstep.io.persistence import (
    read_generation_runs,
    write_generation_runs,
    write_json,
    write_level_text,
)
from lockstep.io.schemas import (
    GENERATION_RUNS_SCHEMA,
    GENERATION_RUNS_SCHEMA_VERSION,
    GENERATION_STATUSES,
    STATUS_EXHAUSTED,
    STATUS_INFEASIBLE,
    STATUS_OK,
)

__all__ = [
    "GENERATION_RUNS_SCHEMA",
    "GENERATION_RUNS_SCHEMA_VERSION",
    "GENERATION_STATUSES",
    "STATUS_EXHAUSTED",
    "STATUS_INFEASIBLE",
    "STATUS_OK",
    "batch_summary_path",
    "generation_runs_path",
    "level_file_path",
    "levels_dir",
    "logs_dir",
    "read_generation_runs",
    "resolve_within_base",
    "write_generation_runs",
    "write_json",
    "write_level_text",
]
