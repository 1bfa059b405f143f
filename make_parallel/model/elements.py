"""
Element variants the host classifies its model objects into.

Each variant carries only the read-only accessors direction extraction needs.
Accessors the host could not evaluate are left as ``None``; the extractor
treats a ``None`` exactly like a failed host call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union

import numpy as np
from numpy.typing import NDArray

from make_parallel import config as cfg
from make_parallel.geometry.bounding_box import BoundingBox
from make_parallel.geometry.vectors import as_vector
from make_parallel.model.categories import BuiltInCategory
from make_parallel.model.curves import Curve


class ElementKind(Enum):
    """Tag of the element variant."""
    GENERIC = "generic"
    GRID = "grid"
    REFERENCE_PLANE = "reference_plane"
    MEP_CURVE = "mep_curve"
    FAMILY_INSTANCE = "family_instance"
    CURVE_ELEMENT = "curve_element"
    VIEWER = "viewer"
    SKETCH_PLANE = "sketch_plane"
    VIEW = "view"
    ELEVATION_MARKER = "elevation_marker"


class ViewType(Enum):
    FLOOR_PLAN = "floor_plan"
    CEILING_PLAN = "ceiling_plan"
    SECTION = "section"
    ELEVATION = "elevation"
    DETAIL = "detail"
    THREE_D = "three_d"
    DRAFTING = "drafting"


# View types the host implements as section views (they carry a right direction)
SECTION_VIEW_TYPES = frozenset({ViewType.SECTION, ViewType.ELEVATION, ViewType.DETAIL})


class MEPSystemKind(Enum):
    PIPE = "pipe"
    DUCT = "duct"
    CABLE_TRAY = "cable_tray"
    CONDUIT = "conduit"


def _optional_vector(value) -> Optional[NDArray[np.float64]]:
    return None if value is None else as_vector(value)


@dataclass(eq=False)
class LocationCurve:
    curve: Optional[Curve]


@dataclass(eq=False)
class LocationPoint:
    point: NDArray[np.float64]
    rotation: float = 0.0

    def __post_init__(self):
        self.point = as_vector(self.point)


Location = Union[LocationCurve, LocationPoint]


@dataclass(eq=False)
class Transform:
    """Placement transform: origin plus basis vectors."""
    origin: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    basis_x: NDArray[np.float64] = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    basis_y: NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    basis_z: NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))

    def __post_init__(self):
        self.origin = as_vector(self.origin)
        self.basis_x = as_vector(self.basis_x)
        self.basis_y = as_vector(self.basis_y)
        self.basis_z = as_vector(self.basis_z)


@dataclass(eq=False)
class Element:
    """Any host model element.

    Attributes:
        id: Host element id, unique within a document
        name: Display name
        category: Host category (``BuiltInCategory`` or a raw id)
        location: Location curve or point, if the element has one
        bounding_box: Model-space extents, if the host can compute them
        fixed_sketch_plane_id: Sketch plane id for view-derived elements
    """
    id: int
    name: str = ""
    category: Optional[Union[BuiltInCategory, int]] = None
    location: Optional[Location] = None
    bounding_box: Optional[BoundingBox] = None
    fixed_sketch_plane_id: Optional[int] = None

    kind: ClassVar[ElementKind] = ElementKind.GENERIC

    @property
    def type_name(self) -> str:
        """Runtime type name shown to the user for unsupported elements."""
        return type(self).__name__

    @property
    def location_curve(self) -> Optional[Curve]:
        if isinstance(self.location, LocationCurve):
            return self.location.curve
        return None

    def __repr__(self) -> str:
        return f"{self.type_name}(id={self.id}, name={self.name!r})"


@dataclass(eq=False, repr=False)
class Grid(Element):
    curve: Optional[Curve] = None

    kind: ClassVar[ElementKind] = ElementKind.GRID

    def __post_init__(self):
        # The host moves a grid through its curve
        if self.location is None and self.curve is not None:
            self.location = LocationCurve(self.curve)


@dataclass(eq=False, repr=False)
class ReferencePlane(Element):
    direction: Optional[NDArray[np.float64]] = None
    plane_origin: Optional[NDArray[np.float64]] = None

    kind: ClassVar[ElementKind] = ElementKind.REFERENCE_PLANE

    def __post_init__(self):
        self.direction = _optional_vector(self.direction)
        self.plane_origin = _optional_vector(self.plane_origin)


@dataclass(eq=False, repr=False)
class MEPCurve(Element):
    """Pipe, duct, cable tray or conduit run."""
    system: MEPSystemKind = MEPSystemKind.PIPE

    kind: ClassVar[ElementKind] = ElementKind.MEP_CURVE


@dataclass(eq=False, repr=False)
class FamilyInstance(Element):
    """Placed component: doors, windows, equipment, fittings, framing."""
    facing_orientation: Optional[NDArray[np.float64]] = None
    transform: Optional[Transform] = None

    kind: ClassVar[ElementKind] = ElementKind.FAMILY_INSTANCE

    def __post_init__(self):
        self.facing_orientation = _optional_vector(self.facing_orientation)


@dataclass(eq=False, repr=False)
class CurveElement(Element):
    """Model/detail line or any other element driven by a location curve."""

    kind: ClassVar[ElementKind] = ElementKind.CURVE_ELEMENT


@dataclass(eq=False, repr=False)
class Viewer(Element):
    """The graphical marker of a section or elevation view in another view."""

    kind: ClassVar[ElementKind] = ElementKind.VIEWER


@dataclass(eq=False, repr=False)
class SketchPlane(Element):
    owner_view_id: Optional[int] = None

    kind: ClassVar[ElementKind] = ElementKind.SKETCH_PLANE


@dataclass(eq=False, repr=False)
class View(Element):
    view_type: ViewType = ViewType.FLOOR_PLAN
    right_direction: Optional[NDArray[np.float64]] = None
    view_origin: Optional[NDArray[np.float64]] = None

    kind: ClassVar[ElementKind] = ElementKind.VIEW

    def __post_init__(self):
        self.right_direction = _optional_vector(self.right_direction)
        self.view_origin = _optional_vector(self.view_origin)

    @property
    def is_section_view(self) -> bool:
        return self.view_type in SECTION_VIEW_TYPES


@dataclass(eq=False, repr=False)
class ElevationMarker(Element):
    """Owner of up to four elevation views, one per slot."""
    view_ids: List[Optional[int]] = field(default_factory=list)

    kind: ClassVar[ElementKind] = ElementKind.ELEVATION_MARKER

    def __post_init__(self):
        if len(self.view_ids) > cfg.ELEVATION_MARKER_SLOTS:
            raise ValueError(
                f"Elevation marker {self.id} has {len(self.view_ids)} view slots, "
                f"maximum is {cfg.ELEVATION_MARKER_SLOTS}"
            )

    @property
    def maximum_view_count(self) -> int:
        return cfg.ELEVATION_MARKER_SLOTS

    def get_view_id(self, index: int) -> Optional[int]:
        """View id in slot ``index``, or None for an empty slot.

        Raises:
            IndexError: if index is outside the marker's slots
        """
        if not 0 <= index < self.maximum_view_count:
            raise IndexError(f"Slot index {index} out of range 0..{self.maximum_view_count - 1}")
        if index >= len(self.view_ids):
            return None
        return self.view_ids[index]
