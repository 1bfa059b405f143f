"""
Planar rotation that makes one element parallel to another.

Both directions are projected onto the XY plane. A line has no forward or
backward sense, so the angle is folded into (-pi/2, pi/2] and the smaller
rotation is always chosen. The rotation axis is ``cross(v2, v1)``: rotating
by ``angle`` about it turns the target direction v2 onto the reference v1.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from make_parallel import config as cfg
from make_parallel.analysis.direction import DirectionExtractor
from make_parallel.geometry.vectors import Line, angle_between, normalize, project_xy
from make_parallel.model.document import Document
from make_parallel.model.elements import Element

logger = logging.getLogger(__name__)


@dataclass
class RotationInstruction:
    """Angle and axis to hand to the host's rotate call.

    ``axis`` is None whenever ``angle`` is 0.
    """
    angle: float = 0.0
    axis: Optional[Line] = None

    @property
    def is_parallel(self) -> bool:
        return self.angle == 0.0

    @property
    def degrees(self) -> float:
        return to_degrees(self.angle)

    def to_dict(self) -> dict:
        return {
            'angle': self.angle,
            'degrees': self.degrees,
            'axis': None if self.axis is None else self.axis.to_dict(),
        }


ALREADY_PARALLEL = "Elements are already parallel"


def to_degrees(radians: float) -> float:
    return radians * 180.0 / math.pi


def _planar_units(direction1, direction2):
    """XY-projected unit vectors, or None if either is missing or vertical."""
    if direction1 is None or direction2 is None:
        return None
    v1 = normalize(project_xy(direction1))
    v2 = normalize(project_xy(direction2))
    if v1 is None or v2 is None:
        return None
    return v1, v2


def folded_angle(direction1, direction2) -> Optional[float]:
    """Unsigned XY angle from direction2 to direction1 folded by pi.

    None when either direction is missing or has no XY extent.
    """
    units = _planar_units(direction1, direction2)
    if units is None:
        return None
    v1, v2 = units
    angle = angle_between(v2, v1)
    if angle > cfg.FOLD_THRESHOLD_RAD:
        angle -= math.pi
    return angle


def are_parallel(direction1, direction2, tolerance_degrees: Optional[float] = None) -> bool:
    """True if the XY projections are within tolerance of 0° or 180°."""
    if tolerance_degrees is None:
        tolerance_degrees = cfg.PARALLEL_CHECK_TOLERANCE_DEG
    units = _planar_units(direction1, direction2)
    if units is None:
        return False
    v1, v2 = units
    angle = angle_between(v2, v1)
    tolerance = math.radians(tolerance_degrees)
    return angle < tolerance or abs(angle - math.pi) < tolerance


def describe_rotation(instruction: Optional[RotationInstruction]) -> str:
    """Human-readable summary, e.g. ``Rotating 12.50° counterclockwise``."""
    if instruction is None or abs(instruction.angle) < cfg.PARALLEL_TOLERANCE_RAD:
        return ALREADY_PARALLEL
    degrees = abs(to_degrees(instruction.angle))
    sense = "counterclockwise" if instruction.angle > 0 else "clockwise"
    return f"Rotating {degrees:.2f}° {sense}"


class ParallelRotationCalculator:
    """Computes the rotation that aligns a target element with a reference.

    Args:
        document: Document used to resolve the target's origin
        tolerance_rad: Parallel tolerance; defaults to the configured constant
    """

    def __init__(self, document: Document, tolerance_rad: Optional[float] = None):
        self.document = document
        self.extractor = DirectionExtractor(document)
        self._tolerance_rad = tolerance_rad

    @property
    def tolerance_rad(self) -> float:
        if self._tolerance_rad is not None:
            return self._tolerance_rad
        return cfg.PARALLEL_TOLERANCE_RAD

    def compute_rotation(self, direction1, direction2, origin_source: Optional[Element] = None) -> RotationInstruction:
        """Rotation turning direction2 parallel to direction1 in plan.

        Args:
            direction1: Reference direction
            direction2: Target direction
            origin_source: Target element; its origin anchors the axis

        Returns:
            RotationInstruction; angle 0 with no axis when already parallel
            or when the input cannot be resolved
        """
        units = _planar_units(direction1, direction2)
        if units is None:
            logger.debug("Directions missing or vertical, no rotation")
            return RotationInstruction()
        v1, v2 = units

        angle = angle_between(v2, v1)
        if angle > cfg.FOLD_THRESHOLD_RAD:
            angle -= math.pi

        if abs(angle) < self.tolerance_rad:
            logger.debug("Already parallel (|angle|=%.6f rad)", abs(angle))
            return RotationInstruction()

        normal = np.cross(v2, v1)
        anchor = self.anchor_point(origin_source)
        logger.debug(
            "Rotation %.6f rad about %s through %s",
            angle, normal.tolist(), anchor.tolist(),
        )
        return RotationInstruction(angle=float(angle), axis=Line(anchor, normal))

    def anchor_point(self, element: Optional[Element]) -> NDArray[np.float64]:
        """Element origin, else bounding-box center, else world origin."""
        if element is not None:
            origin = self.extractor.get_origin(element)
            if origin is not None:
                return origin
            if element.bounding_box is not None:
                logger.debug("No origin for %r, using bounding box center", element)
                return element.bounding_box.center
        return np.zeros(3)
