"""
Curve geometry carried by grids, location curves and model lines.

Only what direction extraction needs is modeled: end points, evaluation at a
(normalized) parameter and length. Evaluation of a degenerate curve raises
``DegenerateGeometryError``.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from make_parallel import config as cfg
from make_parallel.errors import DegenerateGeometryError
from make_parallel.geometry.vectors import VectorLike, as_vector


class Curve:
    """Base class for bound and unbound curves."""

    is_bound: bool = True

    def get_end_point(self, index: int) -> NDArray[np.float64]:
        raise NotImplementedError

    def evaluate(self, parameter: float, normalized: bool = True) -> NDArray[np.float64]:
        raise NotImplementedError

    @property
    def length(self) -> float:
        raise NotImplementedError

    def _check_end_index(self, index: int) -> None:
        if not self.is_bound:
            raise DegenerateGeometryError("Unbound curve has no end points")
        if index not in (0, 1):
            raise IndexError(f"End point index must be 0 or 1, got {index}")


@dataclass
class LineCurve(Curve):
    """Straight segment from ``start`` to ``end``.

    An unbound line keeps ``start`` as its origin and ``end - start`` as its
    direction but exposes no end points.
    """
    start: NDArray[np.float64]
    end: NDArray[np.float64]
    is_bound: bool = True

    def __post_init__(self):
        self.start = as_vector(self.start)
        self.end = as_vector(self.end)

    def get_end_point(self, index: int) -> NDArray[np.float64]:
        self._check_end_index(index)
        return (self.start if index == 0 else self.end).copy()

    @property
    def length(self) -> float:
        if not self.is_bound:
            return math.inf
        return float(np.linalg.norm(self.end - self.start))

    def evaluate(self, parameter: float, normalized: bool = True) -> NDArray[np.float64]:
        if normalized:
            if not self.is_bound:
                raise DegenerateGeometryError("Normalized parameter is undefined on an unbound line")
            if self.length < cfg.ZERO_LENGTH_EPS:
                raise DegenerateGeometryError("Normalized parameter is undefined on a zero-length line")
            return self.start + parameter * (self.end - self.start)
        # Raw parameter is a distance along the line from its start
        unit = (self.end - self.start) / max(float(np.linalg.norm(self.end - self.start)), cfg.ZERO_LENGTH_EPS)
        return self.start + parameter * unit


@dataclass
class ArcCurve(Curve):
    """Circular arc in a horizontal plane at the center's elevation.

    Angles are measured counterclockwise from +X, in radians; the arc runs
    from ``start_angle`` to ``end_angle``.
    """
    center: NDArray[np.float64]
    radius: float
    start_angle: float
    end_angle: float

    def __post_init__(self):
        self.center = as_vector(self.center)
        self.radius = float(self.radius)

    def _point_at_angle(self, angle: float) -> NDArray[np.float64]:
        return self.center + self.radius * np.array([math.cos(angle), math.sin(angle), 0.0])

    def get_end_point(self, index: int) -> NDArray[np.float64]:
        self._check_end_index(index)
        return self._point_at_angle(self.start_angle if index == 0 else self.end_angle)

    @property
    def length(self) -> float:
        return abs(self.end_angle - self.start_angle) * self.radius

    def evaluate(self, parameter: float, normalized: bool = True) -> NDArray[np.float64]:
        if self.length < cfg.ZERO_LENGTH_EPS:
            raise DegenerateGeometryError("Cannot evaluate a zero-length arc")
        if normalized:
            angle = self.start_angle + parameter * (self.end_angle - self.start_angle)
        else:
            angle = self.start_angle + parameter
        return self._point_at_angle(angle)


def line(start: VectorLike, end: VectorLike, is_bound: bool = True) -> LineCurve:
    """Shorthand for ``LineCurve``."""
    return LineCurve(as_vector(start), as_vector(end), is_bound)


def curve_from_dict(data: dict) -> Optional[Curve]:
    """Build a curve from its snapshot form.

    ``{"type": "line", "start": [...], "end": [...]}`` or
    ``{"type": "arc", "center": [...], "radius": r, "start_angle": a0, "end_angle": a1}``.

    Raises:
        ValueError: for an unknown curve type
        KeyError: for a missing field
    """
    if data is None:
        return None
    curve_type = data.get("type", "line")
    if curve_type == "line":
        return LineCurve(data["start"], data["end"], bool(data.get("bound", True)))
    if curve_type == "arc":
        return ArcCurve(data["center"], data["radius"], data["start_angle"], data["end_angle"])
    raise ValueError(f"Unknown curve type: {curve_type!r}")
