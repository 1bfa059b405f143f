"""
Vector helpers for planar alignment.

Vectors and points are plain numpy ``float64`` arrays of shape (3,).
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from make_parallel import config as cfg
from make_parallel.errors import DegenerateGeometryError

VectorLike = Union[Sequence[float], NDArray[np.float64]]


def as_vector(values: VectorLike) -> NDArray[np.float64]:
    """Convert a 3-sequence to a float64 vector.

    Raises:
        ValueError: if the input does not have exactly 3 components
    """
    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected 3 components, got {vec.shape[0]}")
    return vec


def normalize(vector: Optional[VectorLike]) -> Optional[NDArray[np.float64]]:
    """Unit vector, or None for missing, non-finite or zero-length input."""
    if vector is None:
        return None
    vec = np.asarray(vector, dtype=np.float64)
    length = float(np.linalg.norm(vec))
    if not np.isfinite(length) or length < cfg.ZERO_LENGTH_EPS:
        return None
    return vec / length


def normalize_or_raise(vector: VectorLike) -> NDArray[np.float64]:
    """Like ``normalize`` but raises on degenerate input.

    Raises:
        DegenerateGeometryError: if the vector has zero length
    """
    unit = normalize(vector)
    if unit is None:
        raise DegenerateGeometryError(f"Cannot normalize vector {list(np.asarray(vector))}")
    return unit


def project_xy(vector: VectorLike) -> NDArray[np.float64]:
    """Drop the Z component."""
    vec = as_vector(vector)
    return np.array([vec[0], vec[1], 0.0])


def angle_between(a: VectorLike, b: VectorLike) -> float:
    """Unsigned angle in [0, pi] between two non-zero vectors.

    atan2 keeps precision for nearly parallel vectors where arccos of the dot
    product does not.

    Raises:
        DegenerateGeometryError: if either vector has zero length
    """
    ua = normalize_or_raise(a)
    ub = normalize_or_raise(b)
    return float(np.arctan2(np.linalg.norm(np.cross(ua, ub)), np.dot(ua, ub)))


@dataclass
class Line:
    """Bound line given by a point and a direction.

    ``end_point`` is ``origin + direction``, so the direction's length is the
    line's length.
    """
    origin: NDArray[np.float64]
    direction: NDArray[np.float64]

    def __post_init__(self):
        self.origin = as_vector(self.origin)
        self.direction = as_vector(self.direction)

    @property
    def end_point(self) -> NDArray[np.float64]:
        return self.origin + self.direction

    @property
    def unit_direction(self) -> NDArray[np.float64]:
        return normalize_or_raise(self.direction)

    def to_dict(self) -> dict:
        return {
            'origin': self.origin.tolist(),
            'direction': self.direction.tolist(),
        }
