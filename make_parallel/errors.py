"""
Error taxonomy for make_parallel.

Direction extraction and rotation calculation never raise these to their
callers: strategies catch ``DegenerateGeometryError`` at their boundary and
report "no match". Only the command layer raises or reports the rest.
"""

from typing import Optional, Sequence


class MakeParallelError(Exception):
    """Base class for all make_parallel errors."""


class DegenerateGeometryError(MakeParallelError):
    """Zero-length curve or vector: normalization is undefined."""


class UnsupportedElementError(MakeParallelError):
    """No direction-extraction strategy matched the element(s)."""

    def __init__(self, type_names: Sequence[str]):
        self.type_names = list(type_names)
        super().__init__(
            "Cannot determine direction for: " + ", ".join(self.type_names)
        )


class RotationApplicationError(MakeParallelError):
    """The host rejected the rotation (constrained or locked element)."""

    def __init__(self, message: str, element_id: Optional[int] = None):
        self.element_id = element_id
        super().__init__(message)


class SelectionCancelledError(MakeParallelError):
    """The user aborted interactive element picking."""


class ModelLoadError(MakeParallelError):
    """A model snapshot could not be read or classified."""
