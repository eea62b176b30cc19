"""CLI entrypoint for generating, solving, verifying, and batch runs.

This module owns CLI argument parsing and mode dispatch. All domain logic
lives in the extracted modules:

- ``lockstep.config``                 – configuration dataclasses
- ``lockstep.generation.generator``   – constrained generator
- ``lockstep.search.solver``          – breadth-first solver
- ``lockstep.simulation.replay``      – replay parsing and verification
- ``lockstep.experiments.batch``      – batch orchestration and persistence
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from lockstep.config.constants import (
    DEFAULT_ATTEMPTS,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_MOVES,
    DEFAULT_MAX_VISITED,
    DEFAULT_WIDTH,
)
from lockstep.config.types import BatchConfig, GeneratorConfig
from lockstep.domain.level import parse_level_text
from lockstep.experiments.batch import run_generation_batch, summarize_batch
from lockstep.generation.generator import GenerationExhaustedError, generate_level
from lockstep.io.persistence import write_level_text
from lockstep.search.solver import solve
from lockstep.simulation.replay import verify_replay

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_positive_int_csv(raw_values: str, label: str) -> tuple[int, ...]:
    """Parse comma-delimited positive integers."""
    parts = [part.strip() for part in raw_values.split(",") if part.strip()]
    if not parts:
        raise ValueError(f"{label} must not be empty")

    values: list[int] = []
    for part in parts:
        try:
            value = int(part)
        except ValueError as exc:
            raise ValueError(f"{label} must contain integers") from exc
        if value < 1:
            raise ValueError(f"{label} values must be >= 1")
        values.append(value)
    return tuple(values)


def _parse_str_csv(raw_values: str, label: str) -> tuple[str, ...]:
    parts = tuple(part.strip() for part in raw_values.split(",") if part.strip())
    if not parts:
        raise ValueError(f"{label} must not be empty")
    return parts


def _as_bool(raw: object, key: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in {"true", "false"}:
        return raw.strip().lower() == "true"
    raise ValueError(f"{key} must be true or false")


def _as_int(raw: object, key: str) -> int:
    """Accept ints, integral floats, and digit strings; booleans are rejected."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be an integer value, got {raw!r}") from exc
    raise ValueError(f"{key} must be an integer value, got {raw!r}")


def _as_str(raw: object, key: str) -> str:
    if isinstance(raw, (str, Path)):
        return str(raw)
    raise ValueError(f"{key} must be a string")


def _option(
    cli_val: object,
    key: str,
    file_cfg: dict[str, object],
    default: T,
    coerce: Callable[[object, str], T],
) -> T:
    """Resolve one setting: command line, then config file, then default."""
    raw = cli_val if cli_val is not None else file_cfg.get(key, default)
    if raw is None:
        return default
    return coerce(raw, key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate, solve, and verify lockstep puzzle levels"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("--solve", type=Path, default=None, help="Level text file to solve")
    mode_group.add_argument(
        "--verify", type=Path, default=None, help="Level text file to check a replay against"
    )
    mode_group.add_argument("--batch", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--seed", type=str, default=None)
    parser.add_argument("--players", type=int, default=None)
    parser.add_argument("--difficulty", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--attempts", type=int, default=None)
    parser.add_argument("--out", type=Path, default=None, help="Write generated level text here")
    parser.add_argument("--seeds", type=str, default=None, help="Comma-separated batch seeds")
    parser.add_argument(
        "--difficulties", type=str, default=None, help="Comma-separated batch difficulties"
    )
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument("--max-moves", type=int, default=None)
    parser.add_argument("--max-visited", type=int, default=None)
    parser.add_argument("--replay", type=str, default=None, help="Replay such as 6d2r")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=_LOG_LEVELS,
        default=None,
    )
    return parser


def _read_level_file(path: Path, parser: argparse.ArgumentParser) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        parser.error(f"Level file not found: {path}")


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint.

    Supports ``--config path/to/config.json`` for reproducible runs. CLI
    arguments override config-file values; config-file values override
    built-in defaults. Results are printed as JSON.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    try:
        log_level = _option(args.log_level, "log_level", file_cfg, "WARNING", _as_str).upper()
        is_batch = _option(args.batch, "batch", file_cfg, False, _as_bool)
    except ValueError as exc:
        parser.error(str(exc))
    if log_level not in _LOG_LEVELS:
        parser.error(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}")
    logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")

    if is_batch and (args.solve is not None or args.verify is not None):
        parser.error("--batch cannot be combined with --solve or --verify")

    summary: dict[str, object]
    try:
        width = _option(args.width, "width", file_cfg, DEFAULT_WIDTH, _as_int)
        height = _option(args.height, "height", file_cfg, DEFAULT_HEIGHT, _as_int)
        attempts = _option(args.attempts, "attempts", file_cfg, DEFAULT_ATTEMPTS, _as_int)

        if args.solve is not None:
            level = parse_level_text(args.solve.stem, _read_level_file(args.solve, parser))
            result = solve(
                level,
                max_moves=_option(
                    args.max_moves, "max_moves", file_cfg, DEFAULT_MAX_MOVES, _as_int
                ),
                max_visited=_option(
                    args.max_visited, "max_visited", file_cfg, DEFAULT_MAX_VISITED, _as_int
                ),
            )
            summary = {
                "mode": "solve",
                "level_id": level.level_id,
                "min_moves": result.min_moves,
                "move_path": (
                    [d.value for d in result.move_path] if result.move_path is not None else None
                ),
                "visited_count": result.visited_count,
                "truncated": result.truncated,
            }
        elif args.verify is not None:
            replay = _option(args.replay, "replay", file_cfg, None, _as_str)
            if replay is None:
                parser.error("--verify requires --replay")
            verdict = verify_replay(_read_level_file(args.verify, parser), replay)
            summary = {"mode": "verify", "ok": verdict.ok, "moves": verdict.moves}
        elif is_batch:
            batch_config = BatchConfig(
                seeds=_parse_str_csv(_option(args.seeds, "seeds", file_cfg, "", _as_str), "seeds"),
                difficulties=_parse_positive_int_csv(
                    _option(args.difficulties, "difficulties", file_cfg, "", _as_str),
                    "difficulties",
                ),
                players=_option(args.players, "players", file_cfg, 1, _as_int),
                width=width,
                height=height,
                max_attempts=attempts,
                out_dir=Path(_option(args.out_dir, "out_dir", file_cfg, "data", _as_str)),
            )
            rows = run_generation_batch(batch_config)
            summary = {"mode": "batch", **summarize_batch(rows)}
        else:
            seed = _option(args.seed, "seed", file_cfg, None, _as_str)
            players = _option(args.players, "players", file_cfg, None, _as_int)
            difficulty = _option(args.difficulty, "difficulty", file_cfg, None, _as_int)
            if seed is None or players is None or difficulty is None:
                parser.error("generation requires --seed, --players and --difficulty")
            generated = generate_level(
                GeneratorConfig(
                    seed=seed,
                    players=players,
                    difficulty=difficulty,
                    width=width,
                    height=height,
                    max_attempts=attempts,
                )
            )
            out_path = _option(args.out, "out", file_cfg, None, _as_str)
            if out_path is not None:
                written = write_level_text(generated.level_text, Path(out_path))
                logger.info("Wrote level text to %s", written)
            summary = {"mode": "generate", **generated.to_dict()}
    except (ValueError, GenerationExhaustedError) as exc:
        parser.exit(status=1, message=f"{exc}\n")

    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
