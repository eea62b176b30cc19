"""Experiments layer: batch generation and the command-line entrypoint."""

from lockstep.experiments.batch import run_generation_batch, summarize_batch

__all__ = [
    "run_generation_batch",
    "summarize_batch",
]
