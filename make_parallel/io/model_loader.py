"""
Loading of host model snapshots.

A snapshot is a JSON document exported from a live host model. It plays the
role of the host-side classification step: every entry names its variant
with ``kind`` and carries only the accessors that variant exposes.

Example:
{
    "title": "Level 1 coordination",
    "elements": [
        {"id": 1, "kind": "grid", "name": "A",
         "curve": {"type": "line", "start": [0, 0, 0], "end": [0, 30, 0]}},
        {"id": 2, "kind": "mep_curve", "system": "duct", "category": "OST_DuctCurves",
         "location": {"curve": {"start": [2, 0, 3], "end": [12, 4, 3]}}},
        {"id": 3, "kind": "family_instance", "facing_orientation": [0, -1, 0],
         "transform": {"origin": [5, 5, 0], "basis_x": [1, 0, 0]}}
    ]
}
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

from make_parallel.errors import ModelLoadError
from make_parallel.geometry.bounding_box import BoundingBox
from make_parallel.logging_config import timed
from make_parallel.model.categories import parse_category
from make_parallel.model.curves import curve_from_dict
from make_parallel.model.document import Document
from make_parallel.model.elements import (
    CurveElement,
    Element,
    ElementKind,
    ElevationMarker,
    FamilyInstance,
    Grid,
    Location,
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

logger = logging.getLogger(__name__)


@dataclass
class ModelInfo:
    """Metadata about a loaded snapshot."""
    source: str
    title: str
    n_elements: int
    kinds: Dict[str, int] = field(default_factory=dict)


def _location(data: Optional[Dict[str, Any]]) -> Optional[Location]:
    if data is None:
        return None
    if "curve" in data:
        return LocationCurve(curve_from_dict(data["curve"]))
    if "point" in data:
        return LocationPoint(data["point"], float(data.get("rotation", 0.0)))
    raise ValueError(f"Location needs 'curve' or 'point', got keys {sorted(data)}")


def _bounding_box(data: Optional[Dict[str, Any]]) -> Optional[BoundingBox]:
    if data is None:
        return None
    return BoundingBox(data["min"], data["max"])


def _transform(data: Optional[Dict[str, Any]]) -> Optional[Transform]:
    if data is None:
        return None
    return Transform(**{k: data[k] for k in ("origin", "basis_x", "basis_y", "basis_z") if k in data})


def _common(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": int(data["id"]),
        "name": str(data.get("name", "")),
        "category": parse_category(data.get("category")),
        "location": _location(data.get("location")),
        "bounding_box": _bounding_box(data.get("bounding_box")),
        "fixed_sketch_plane_id": data.get("fixed_sketch_plane_id"),
    }


def _grid(data):
    return Grid(**_common(data), curve=curve_from_dict(data.get("curve")))


def _reference_plane(data):
    return ReferencePlane(
        **_common(data),
        direction=data.get("direction"),
        plane_origin=data.get("plane_origin"),
    )


def _mep_curve(data):
    return MEPCurve(**_common(data), system=MEPSystemKind(data.get("system", "pipe")))


def _family_instance(data):
    return FamilyInstance(
        **_common(data),
        facing_orientation=data.get("facing_orientation"),
        transform=_transform(data.get("transform")),
    )


def _view(data):
    return View(
        **_common(data),
        view_type=ViewType(data.get("view_type", "floor_plan")),
        right_direction=data.get("right_direction"),
        view_origin=data.get("view_origin"),
    )


def _sketch_plane(data):
    return SketchPlane(**_common(data), owner_view_id=data.get("owner_view_id"))


def _elevation_marker(data):
    return ElevationMarker(**_common(data), view_ids=list(data.get("view_ids", [])))


_BUILDERS: Dict[ElementKind, Callable[[Dict[str, Any]], Element]] = {
    ElementKind.GENERIC: lambda data: Element(**_common(data)),
    ElementKind.GRID: _grid,
    ElementKind.REFERENCE_PLANE: _reference_plane,
    ElementKind.MEP_CURVE: _mep_curve,
    ElementKind.FAMILY_INSTANCE: _family_instance,
    ElementKind.CURVE_ELEMENT: lambda data: CurveElement(**_common(data)),
    ElementKind.VIEWER: lambda data: Viewer(**_common(data)),
    ElementKind.SKETCH_PLANE: _sketch_plane,
    ElementKind.VIEW: _view,
    ElementKind.ELEVATION_MARKER: _elevation_marker,
}


def element_from_dict(data: Dict[str, Any]) -> Element:
    """Classify one snapshot entry into its element variant.

    Raises:
        ModelLoadError: for an unknown kind or malformed fields
    """
    if "id" not in data:
        raise ModelLoadError(f"Element entry without id: {data!r}")
    try:
        kind = ElementKind(data.get("kind", "generic"))
    except ValueError:
        raise ModelLoadError(f"Element {data['id']}: unknown kind {data.get('kind')!r}") from None
    try:
        return _BUILDERS[kind](data)
    except (KeyError, TypeError, ValueError) as exc:
        raise ModelLoadError(f"Element {data['id']} ({kind.value}): {exc}") from exc


def load_model_from_dict(data: Dict[str, Any], source: str = "<dict>") -> Tuple[Document, ModelInfo]:
    """Build a document from an already parsed snapshot.

    Raises:
        ModelLoadError: if the snapshot is malformed or has duplicate ids
    """
    entries = data.get("elements") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ModelLoadError(f"{source}: snapshot must contain an 'elements' list")

    document = Document(title=str(data.get("title", "")))
    for entry in entries:
        element = element_from_dict(entry)
        try:
            document.add(element)
        except ValueError as exc:
            raise ModelLoadError(f"{source}: {exc}") from exc

    kinds = Counter(element.kind.value for element in document)
    info = ModelInfo(source=source, title=document.title, n_elements=len(document), kinds=dict(kinds))
    logger.info("Loaded %d elements from %s", info.n_elements, source, extra={"kinds": info.kinds})
    return document, info


@timed()
def load_model(path: Union[str, Path]) -> Tuple[Document, ModelInfo]:
    """Read a snapshot file.

    Raises:
        ModelLoadError: if the file is missing, is not JSON or is malformed
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ModelLoadError(f"Model file not found: {str(path)!r}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise ModelLoadError(f"Cannot read model file {str(path)!r}: {exc}") from exc
    return load_model_from_dict(data, source=str(path))
