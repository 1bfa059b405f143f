"""Geometry primitives: vectors, axis lines, bounding boxes, rotations."""

from make_parallel.geometry.bounding_box import BoundingBox
from make_parallel.geometry.rotation import Rotation3D, rotate_about_line, rotate_direction
from make_parallel.geometry.vectors import (
    Line,
    angle_between,
    as_vector,
    normalize,
    normalize_or_raise,
    project_xy,
)

__all__ = [
    "BoundingBox",
    "Line",
    "Rotation3D",
    "angle_between",
    "as_vector",
    "normalize",
    "normalize_or_raise",
    "project_xy",
    "rotate_about_line",
    "rotate_direction",
]
