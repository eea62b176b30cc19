"""Path construction helpers for generation output directories.

Centralises the directory/file naming conventions used by batch generation
and the CLI.
"""

from __future__ import annotations

import re
from pathlib import Path

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve *path* and ensure it stays within the trusted *base_dir*.

    Raises :exc:`ValueError` if the resolved path escapes the base directory.
    """
    candidate = path if path.is_absolute() else base_dir / path
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()
    if resolved != base_resolved and base_resolved not in resolved.parents:
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def levels_dir(out_dir: Path) -> Path:
    """Return path to the generated level text directory."""
    return out_dir / "levels"


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def generation_runs_path(out_dir: Path) -> Path:
    """Return path to the per-level generation runs Parquet file."""
    return logs_dir(out_dir) / "generation_runs.parquet"


def batch_summary_path(out_dir: Path) -> Path:
    """Return path to the aggregate batch summary JSON file."""
    return logs_dir(out_dir) / "batch_summary.json"


def level_file_path(out_dir: Path, seed: str, difficulty: int) -> Path:
    """Return the level text path for one (seed, difficulty) cell.

    Seeds are free text, so characters outside ``[A-Za-z0-9_.-]`` are replaced
    before the name is resolved under the levels directory.
    """
    safe_seed = _UNSAFE_NAME_CHARS.sub("_", seed) or "_"
    base = levels_dir(out_dir)
    return resolve_within_base(Path(f"{safe_seed}_d{difficulty}.txt"), base)
