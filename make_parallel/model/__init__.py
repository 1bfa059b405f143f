"""Host model: categories, curves, element variants and the document."""

from make_parallel.model.categories import BuiltInCategory, is_mep_category, mep_categories
from make_parallel.model.curves import ArcCurve, Curve, LineCurve, line
from make_parallel.model.document import Document
from make_parallel.model.elements import (
    CurveElement,
    Element,
    ElementKind,
    ElevationMarker,
    FamilyInstance,
    Grid,
    LocationCurve,
    LocationPoint,
    MEPCurve,
    MEPSystemKind,
    ReferencePlane,
    SketchPlane,
    Transform,
    View,
    Viewer,
    ViewType,
)

__all__ = [
    "ArcCurve",
    "BuiltInCategory",
    "Curve",
    "CurveElement",
    "Document",
    "Element",
    "ElementKind",
    "ElevationMarker",
    "FamilyInstance",
    "Grid",
    "LineCurve",
    "LocationCurve",
    "LocationPoint",
    "MEPCurve",
    "MEPSystemKind",
    "ReferencePlane",
    "SketchPlane",
    "Transform",
    "View",
    "Viewer",
    "ViewType",
    "is_mep_category",
    "line",
    "mep_categories",
]
