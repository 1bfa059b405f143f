"""
Direction and origin extraction for heterogeneous model elements.

Resolution runs an ordered list of strategies and takes the first result.
The order is a priority policy: an MEP run also has a location curve that the
generic line strategy would accept, and a family instance may carry a
location curve too, so the more specific interpretation must come first.

    1. grid             curve end - start
    2. reference plane  the plane's direction
    3. MEP curve        location curve end - start
    4. family instance  facing orientation, else transform X basis
    5. line based       location curve end - start
    6. section view     right direction of the owning section view

A strategy that hits missing data or degenerate geometry reports "no match"
and the next one is tried; extraction itself never raises.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from make_parallel import config as cfg
from make_parallel.errors import DegenerateGeometryError
from make_parallel.geometry.vectors import normalize, normalize_or_raise
from make_parallel.model.categories import is_mep_category
from make_parallel.model.curves import Curve
from make_parallel.model.document import Document
from make_parallel.model.elements import (
    Element,
    ElevationMarker,
    FamilyInstance,
    Grid,
    MEPCurve,
    ReferencePlane,
    SketchPlane,
    View,
    ViewType,
)

logger = logging.getLogger(__name__)

Vector = NDArray[np.float64]

@dataclass
class Resolution:
    """Vector produced by a named strategy."""
    strategy: str
    vector: Vector


def curve_direction(curve: Optional[Curve]) -> Optional[Vector]:
    """Unit vector from a curve's start point to its end point.

    Raises:
        DegenerateGeometryError: for zero-length or unbound curves
    """
    if curve is None:
        return None
    return normalize_or_raise(curve.get_end_point(1) - curve.get_end_point(0))


def curve_origin(curve: Optional[Curve]) -> Optional[Vector]:
    """Curve midpoint, falling back to its start point."""
    if curve is None:
        return None
    try:
        return curve.evaluate(cfg.CURVE_MIDPOINT_PARAMETER, normalized=True)
    except Exception as exc:
        logger.debug("Midpoint evaluation failed (%s), using start point", exc)
    try:
        return curve.get_end_point(0)
    except DegenerateGeometryError:
        return None


class ExtractionStrategy:
    """One element-type-specific way of reading a direction and an origin.

    Subclasses override ``_direction`` and ``_origin``; returning None means
    the element is not theirs.
    """

    name = "base"

    def __init__(self, document: Document):
        self.document = document

    def try_direction(self, element: Element) -> Optional[Vector]:
        return self._attempt(self._direction, element, "direction")

    def try_origin(self, element: Element) -> Optional[Vector]:
        return self._attempt(self._origin, element, "origin")

    def _attempt(self, extract, element: Element, what: str) -> Optional[Vector]:
        try:
            result = extract(element)
        except Exception as exc:
            # Host accessors may fail in any way; a failure only means "no match"
            logger.debug("%s strategy: no %s for %r (%s)", self.name, what, element, exc)
            return None
        return None if result is None else np.array(result, dtype=np.float64)

    def _direction(self, element: Element) -> Optional[Vector]:
        return None

    def _origin(self, element: Element) -> Optional[Vector]:
        return None


class GridStrategy(ExtractionStrategy):
    name = "grid"

    def _direction(self, element):
        if isinstance(element, Grid):
            return curve_direction(element.curve)
        return None

    def _origin(self, element):
        if isinstance(element, Grid):
            return curve_origin(element.curve)
        return None


class ReferencePlaneStrategy(ExtractionStrategy):
    name = "reference_plane"

    def _direction(self, element):
        if isinstance(element, ReferencePlane):
            return element.direction
        return None

    def _origin(self, element):
        if isinstance(element, ReferencePlane):
            return element.plane_origin
        return None


class MEPStrategy(ExtractionStrategy):
    """Pipes, ducts, cable trays, conduits and MEP-category curve elements."""

    name = "mep"

    @staticmethod
    def _matches(element: Element) -> bool:
        if isinstance(element, MEPCurve):
            return True
        return element.location_curve is not None and is_mep_category(element.category)

    def _direction(self, element):
        if self._matches(element):
            return curve_direction(element.location_curve)
        return None

    def _origin(self, element):
        if self._matches(element):
            return curve_origin(element.location_curve)
        return None


class FamilyInstanceStrategy(ExtractionStrategy):
    name = "family_instance"

    def _direction(self, element):
        if not isinstance(element, FamilyInstance):
            return None
        facing = normalize(element.facing_orientation)
        if facing is not None:
            return facing
        if element.transform is not None:
            logger.debug("No facing orientation on %r, using transform X basis", element)
            return normalize(element.transform.basis_x)
        return None

    def _origin(self, element):
        if isinstance(element, FamilyInstance) and element.transform is not None:
            return element.transform.origin
        return None


class LineBasedStrategy(ExtractionStrategy):
    name = "line_based"

    def _direction(self, element):
        return curve_direction(element.location_curve)

    def _origin(self, element):
        return curve_origin(element.location_curve)


class SectionViewStrategy(ExtractionStrategy):
    """Elements drawn on a section view's fixed sketch plane."""

    name = "section_view"

    def _direction(self, element):
        view = owning_view(self.document, element)
        if view is not None and view.is_section_view:
            return view.right_direction
        return None

    def _origin(self, element):
        view = owning_view(self.document, element)
        if view is not None and view.is_section_view:
            return view.view_origin
        return None


def owning_view(document: Document, element: Element) -> Optional[View]:
    """Follow fixed sketch plane -> owner view; None if the chain breaks."""
    sketch_plane = document.get_element(element.fixed_sketch_plane_id)
    if not isinstance(sketch_plane, SketchPlane):
        return None
    view = document.get_element(sketch_plane.owner_view_id)
    return view if isinstance(view, View) else None


def default_strategies(document: Document) -> List[ExtractionStrategy]:
    """Strategies in priority order."""
    return [
        GridStrategy(document),
        ReferencePlaneStrategy(document),
        MEPStrategy(document),
        FamilyInstanceStrategy(document),
        LineBasedStrategy(document),
        SectionViewStrategy(document),
    ]


class DirectionExtractor:
    """Resolves direction vectors and origin points of elements in a document.

    Args:
        document: Owning document, used to follow sketch plane and view references
        strategies: Override of the default priority-ordered strategies
    """

    def __init__(self, document: Document, strategies: Optional[Sequence[ExtractionStrategy]] = None):
        self.document = document
        self.strategies = list(strategies) if strategies is not None else default_strategies(document)

    def resolve_direction(self, element: Optional[Element]) -> Optional[Resolution]:
        """First strategy that yields a direction, with its name."""
        if element is None:
            return None
        for strategy in self.strategies:
            vector = strategy.try_direction(element)
            if vector is not None:
                logger.debug("Direction of %r via %s: %s", element, strategy.name, vector.tolist())
                return Resolution(strategy.name, vector)
        logger.debug("No direction strategy matched %r", element)
        return None

    def resolve_origin(self, element: Optional[Element]) -> Optional[Resolution]:
        """First strategy that yields an origin, with its name."""
        if element is None:
            return None
        for strategy in self.strategies:
            point = strategy.try_origin(element)
            if point is not None:
                return Resolution(strategy.name, point)
        return None

    def get_direction(self, element: Optional[Element]) -> Optional[Vector]:
        """Direction vector, or None when the element type is unsupported."""
        resolution = self.resolve_direction(element)
        return None if resolution is None else resolution.vector

    def get_origin(self, element: Optional[Element]) -> Optional[Vector]:
        """Representative point, or None when no strategy can provide one."""
        resolution = self.resolve_origin(element)
        return None if resolution is None else resolution.vector

    # ------------------------------------------------------------------
    # Elevation views
    # ------------------------------------------------------------------

    def is_elevation_derived(self, element: Optional[Element]) -> bool:
        """True iff the element belongs to an elevation view."""
        if element is None:
            return False
        view = owning_view(self.document, element)
        return view is not None and view.view_type is ViewType.ELEVATION

    def resolve_elevation_marker_owner(self, element: Optional[Element]) -> Optional[ElevationMarker]:
        """Marker whose view slots include the element's view.

        Rotating an elevation view's own geometry has no effect; its marker is
        what actually turns.
        """
        if element is None:
            return None
        view = owning_view(self.document, element)
        if view is None:
            return None
        for marker in self.document.elements_of(ElevationMarker):
            for slot in range(marker.maximum_view_count):
                if marker.get_view_id(slot) == view.id:
                    logger.debug("View %d is slot %d of elevation marker %d", view.id, slot, marker.id)
                    return marker
        return None
