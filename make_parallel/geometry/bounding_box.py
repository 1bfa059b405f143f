"""
Axis-aligned bounding box of a model element.

The host reports element extents as a (min, max) corner pair; the box center
is the last-resort pivot for a rotation when an element has no origin.
"""

from dataclasses import dataclass
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from make_parallel.geometry.vectors import VectorLike, as_vector


@dataclass
class BoundingBox:
    """Axis-Aligned Bounding Box (AABB).

    Attributes:
        min_point: Minimum corner (x_min, y_min, z_min)
        max_point: Maximum corner (x_max, y_max, z_max)
    """
    min_point: NDArray[np.float64]
    max_point: NDArray[np.float64]

    def __post_init__(self):
        self.min_point = as_vector(self.min_point)
        self.max_point = as_vector(self.max_point)
        if np.any(self.min_point > self.max_point):
            raise ValueError(
                f"Bounding box min {self.min_point.tolist()} exceeds max {self.max_point.tolist()}"
            )

    @classmethod
    def from_points(cls, points: Iterable[VectorLike]) -> 'BoundingBox':
        """Smallest box containing all points.

        Raises:
            ValueError: if no points are given
        """
        arr = np.asarray([as_vector(p) for p in points], dtype=np.float64)
        if arr.size == 0:
            raise ValueError("Cannot build a bounding box from zero points")
        return cls(arr.min(axis=0), arr.max(axis=0))

    @property
    def dimensions(self) -> NDArray[np.float64]:
        """Box size along X, Y and Z."""
        return self.max_point - self.min_point

    @property
    def center(self) -> NDArray[np.float64]:
        return (self.min_point + self.max_point) / 2

    def contains_point(self, point: VectorLike) -> bool:
        p = as_vector(point)
        return bool(np.all(p >= self.min_point) and np.all(p <= self.max_point))

    def to_dict(self) -> dict:
        return {
            'min': self.min_point.tolist(),
            'max': self.max_point.tolist(),
            'dimensions': self.dimensions.tolist(),
            'center': self.center.tolist(),
        }
