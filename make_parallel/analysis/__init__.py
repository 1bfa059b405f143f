"""Direction extraction and parallel rotation calculation."""

from make_parallel.analysis.direction import (
    DirectionExtractor,
    ExtractionStrategy,
    Resolution,
    default_strategies,
)
from make_parallel.analysis.parallel import (
    ParallelRotationCalculator,
    RotationInstruction,
    are_parallel,
    describe_rotation,
    to_degrees,
)

__all__ = [
    "DirectionExtractor",
    "ExtractionStrategy",
    "ParallelRotationCalculator",
    "Resolution",
    "RotationInstruction",
    "are_parallel",
    "default_strategies",
    "describe_rotation",
    "to_degrees",
]
