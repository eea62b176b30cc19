"""Generation layer: seeded random stream and the constrained level generator."""

from lockstep.generation.generator import (
    Feasibility,
    GeneratedLevel,
    GenerationExhaustedError,
    InfeasibleLayoutError,
    check_feasibility,
    generate,
    generate_level,
)
from lockstep.generation.rng import SeededRandom

__all__ = [
    "Feasibility",
    "GeneratedLevel",
    "GenerationExhaustedError",
    "InfeasibleLayoutError",
    "SeededRandom",
    "check_feasibility",
    "generate",
    "generate_level",
]
