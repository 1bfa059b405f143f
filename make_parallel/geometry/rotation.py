"""
Rotation utilities for previewing and verifying rotation instructions.

The host applies the actual rotation to model geometry. These helpers let the
core (and its tests) check what a rotation about a given axis line does to a
direction or a point:

- Rotation3D: 3x3 rotation matrix built with Rodrigues' formula
- rotate_about_line: rotate points about an arbitrary axis line
- rotate_direction: rotate a free vector (translation-invariant)
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from make_parallel.geometry.vectors import Line, VectorLike, as_vector, normalize_or_raise

logger = logging.getLogger(__name__)


@dataclass
class Rotation3D:
    """3D rotation represented as a rotation matrix.

    Attributes:
        matrix: 3x3 orthogonal rotation matrix (det = +1)
    """
    matrix: NDArray[np.float64]

    def __post_init__(self):
        self.matrix = np.asarray(self.matrix, dtype=np.float64)
        if self.matrix.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got {self.matrix.shape}")

    @classmethod
    def identity(cls) -> 'Rotation3D':
        return cls(np.eye(3))

    @classmethod
    def from_axis_angle(cls, axis: VectorLike, angle_rad: float) -> 'Rotation3D':
        """Right-handed rotation of ``angle_rad`` about ``axis`` (Rodrigues).

        Raises:
            DegenerateGeometryError: if the axis has zero length
        """
        x, y, z = normalize_or_raise(axis)

        c = np.cos(angle_rad)
        s = np.sin(angle_rad)
        t = 1 - c

        matrix = np.array([
            [t*x*x + c,   t*x*y - s*z, t*x*z + s*y],
            [t*x*y + s*z, t*y*y + c,   t*y*z - s*x],
            [t*x*z - s*y, t*y*z + s*x, t*z*z + c],
        ])
        return cls(matrix)

    @classmethod
    def around_z(cls, angle_rad: float) -> 'Rotation3D':
        """Rotation in the XY plane (counterclockwise seen from +Z)."""
        return cls.from_axis_angle(np.array([0.0, 0.0, 1.0]), angle_rad)

    def apply(self, points: VectorLike) -> NDArray[np.float64]:
        """Apply to a single vector (3,) or to an Nx3 array."""
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            return self.matrix @ points
        return points @ self.matrix.T

    def compose(self, other: 'Rotation3D') -> 'Rotation3D':
        """``self * other``: applies ``other`` first, then ``self``."""
        return Rotation3D(self.matrix @ other.matrix)

    def inverse(self) -> 'Rotation3D':
        return Rotation3D(self.matrix.T)

    @property
    def axis_angle(self) -> Tuple[NDArray[np.float64], float]:
        """Extract (axis, angle_rad) with angle in [0, pi]."""
        trace = np.trace(self.matrix)
        angle = float(np.arccos(np.clip((trace - 1) / 2, -1.0, 1.0)))

        if abs(angle) < 1e-9:
            return np.array([1.0, 0.0, 0.0]), 0.0

        if abs(angle - np.pi) < 1e-6:
            eigenvalues, eigenvectors = np.linalg.eig(self.matrix)
            idx = np.argmin(np.abs(eigenvalues - 1))
            axis = np.real(eigenvectors[:, idx])
            return axis / np.linalg.norm(axis), float(np.pi)

        axis = np.array([
            self.matrix[2, 1] - self.matrix[1, 2],
            self.matrix[0, 2] - self.matrix[2, 0],
            self.matrix[1, 0] - self.matrix[0, 1],
        ])
        return axis / (2 * np.sin(angle)), angle

    def is_identity(self, tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.matrix, np.eye(3), atol=tol))

    def __matmul__(self, other: 'Rotation3D') -> 'Rotation3D':
        return self.compose(other)


def rotate_direction(direction: VectorLike, axis: Line, angle_rad: float) -> NDArray[np.float64]:
    """Rotate a free vector about the axis line's direction.

    The axis position does not matter for directions.
    """
    return Rotation3D.from_axis_angle(axis.direction, angle_rad).apply(as_vector(direction))


def rotate_about_line(points: VectorLike, axis: Line, angle_rad: float) -> NDArray[np.float64]:
    """Rotate a point (3,) or points (Nx3) about an axis line."""
    rotation = Rotation3D.from_axis_angle(axis.direction, angle_rad)
    pts = np.asarray(points, dtype=np.float64)
    rotated = rotation.apply(pts - axis.origin) + axis.origin
    logger.debug("Rotated %d point(s) by %.6f rad", 1 if pts.ndim == 1 else len(pts), angle_rad)
    return rotated
