"""
Pytest configuration and fixtures for make_parallel.

Provides:
- Restoration of make_parallel.config constants between tests
- Documents with one element of each supported variant
- An elevation view setup (marker with four view slots)
- Snapshot file fixtures for the loader and the CLI
- Assertion helpers
"""

import json
import logging
import math
from pathlib import Path

import numpy as np
import pytest

from make_parallel import config as cfg
from make_parallel.geometry.bounding_box import BoundingBox
from make_parallel.model.categories import BuiltInCategory
from make_parallel.model.curves import line
from make_parallel.model.document import Document
from make_parallel.model.elements import (
    CurveElement,
    Element,
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

_CONFIG_NAMES = [name for name in dir(cfg) if name.isupper()]


# ============================================================================
# Global state
# ============================================================================

@pytest.fixture(autouse=True)
def restore_config_constants():
    """Undo apply_config_to_globals() calls made by a test."""
    saved = {name: getattr(cfg, name) for name in _CONFIG_NAMES}
    yield
    for name, value in saved.items():
        setattr(cfg, name, value)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo setup_logging() calls made by a test or by the CLI."""
    logger = logging.getLogger("make_parallel")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in logger.handlers:
        if handler not in saved[0]:
            handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


# ============================================================================
# Element Fixtures
# ============================================================================

@pytest.fixture
def grid_x() -> Grid:
    """Grid running along +X, 20 units long."""
    return Grid(id=1, name="1", category=BuiltInCategory.OST_Grids,
                curve=line([0, 0, 0], [20, 0, 0]))


@pytest.fixture
def grid_diagonal() -> Grid:
    """Grid at 45° in plan."""
    return Grid(id=2, name="A", category=BuiltInCategory.OST_Grids,
                curve=line([0, 0, 0], [10, 10, 0]))


@pytest.fixture
def reference_plane() -> ReferencePlane:
    """Reference plane pointing along +Y."""
    return ReferencePlane(id=3, name="Ref", category=BuiltInCategory.OST_CLines,
                          location=LocationPoint([5, 5, 0]),
                          direction=[0, 1, 0], plane_origin=[5, 5, 0])


@pytest.fixture
def pipe() -> MEPCurve:
    """Sloped pipe: plan direction (3, 4)."""
    return MEPCurve(id=4, name="Pipe", category=BuiltInCategory.OST_PipeCurves,
                    location=LocationCurve(line([0, 0, 10], [3, 4, 9])),
                    system=MEPSystemKind.PIPE)


@pytest.fixture
def flex_duct() -> CurveElement:
    """Curve element tagged with an MEP category rather than an MEP class."""
    return CurveElement(id=5, name="Flex duct", category=BuiltInCategory.OST_FlexDuctCurves,
                        location=LocationCurve(line([1, 1, 3], [1, 9, 3])))


@pytest.fixture
def door() -> FamilyInstance:
    """Door facing -Y, placed at (4, 2, 0)."""
    return FamilyInstance(id=6, name="Door", category=BuiltInCategory.OST_Doors,
                          location=LocationPoint([4, 2, 0]),
                          facing_orientation=[0, -1, 0],
                          transform=Transform(origin=[4, 2, 0], basis_x=[1, 0, 0]))


@pytest.fixture
def wall() -> CurveElement:
    """Wall along (1, 1) in plan."""
    return CurveElement(id=7, name="Wall", category=BuiltInCategory.OST_Walls,
                        location=LocationCurve(line([0, 0, 0], [6, 6, 0])),
                        bounding_box=BoundingBox([0, 0, 0], [6, 6, 3]))


@pytest.fixture
def section_setup():
    """Section view marker: viewer -> sketch plane -> section view."""
    view = View(id=20, name="Section 1", view_type=ViewType.SECTION,
                right_direction=[0, 1, 0], view_origin=[10, 0, 0])
    sketch = SketchPlane(id=21, owner_view_id=20)
    viewer = Viewer(id=22, name="Section 1", category=BuiltInCategory.OST_Viewers,
                    location=LocationPoint([10, 0, 0]), fixed_sketch_plane_id=21)
    return viewer, sketch, view


@pytest.fixture
def elevation_setup():
    """Elevation view registered as slot 2 of a four-slot marker."""
    view = View(id=30, name="East", view_type=ViewType.ELEVATION,
                right_direction=[0, -1, 0], view_origin=[50, 0, 0])
    other_views = [
        View(id=31, name="North", view_type=ViewType.ELEVATION, right_direction=[1, 0, 0]),
        View(id=32, name="West", view_type=ViewType.ELEVATION, right_direction=[0, 1, 0]),
        View(id=33, name="South", view_type=ViewType.ELEVATION, right_direction=[-1, 0, 0]),
    ]
    sketch = SketchPlane(id=34, owner_view_id=30)
    viewer = Viewer(id=35, name="East", location=LocationPoint([50, 0, 0]),
                    fixed_sketch_plane_id=34)
    decoy = ElevationMarker(id=36, view_ids=[None, 99])
    marker = ElevationMarker(id=37, location=LocationPoint([45, 0, 0]),
                             view_ids=[31, 32, 30, 33])
    return viewer, marker, [view, sketch, decoy, marker, *other_views]


@pytest.fixture
def document(grid_x, grid_diagonal, reference_plane, pipe, flex_duct, door, wall,
             section_setup, elevation_setup) -> Document:
    """Document holding every fixture element."""
    viewer, _marker, elevation_elements = elevation_setup
    return Document(
        [grid_x, grid_diagonal, reference_plane, pipe, flex_duct, door, wall,
         *section_setup, viewer, *elevation_elements,
         Element(id=90, name="Room")],
        title="fixture model",
    )


# ============================================================================
# Snapshot Fixtures
# ============================================================================

SAMPLE_SNAPSHOT = {
    "title": "Sample",
    "elements": [
        {"id": 1, "kind": "grid", "name": "A",
         "curve": {"type": "line", "start": [0, 0, 0], "end": [0, 30, 0]}},
        {"id": 2, "kind": "mep_curve", "system": "duct", "category": "OST_DuctCurves",
         "location": {"curve": {"start": [0, 0, 3], "end": [10, 10, 3]}}},
        {"id": 3, "kind": "family_instance", "category": "OST_Doors",
         "facing_orientation": [1, 0, 0],
         "transform": {"origin": [5, 5, 0], "basis_x": [0, -1, 0]},
         "location": {"point": [5, 5, 0]}},
        {"id": 4, "kind": "curve_element", "category": "OST_Walls",
         "location": {"curve": {"type": "arc", "center": [0, 0, 0], "radius": 5,
                                "start_angle": 0, "end_angle": math.pi / 2}}},
        {"id": 5, "kind": "generic", "name": "Room"},
        {"id": 6, "kind": "grid", "name": "B",
         "curve": {"type": "line", "start": [0, 0, 0], "end": [30, 0, 0]}},
    ],
}


@pytest.fixture
def snapshot_data() -> dict:
    return json.loads(json.dumps(SAMPLE_SNAPSHOT))


@pytest.fixture
def snapshot_path(tmp_path: Path, snapshot_data: dict) -> Path:
    """Sample snapshot written to a temporary file."""
    path = tmp_path / "model.json"
    path.write_text(json.dumps(snapshot_data), encoding="utf-8")
    return path


# ============================================================================
# Assertion Helpers
# ============================================================================

def planar_unit(angle_rad: float) -> np.ndarray:
    """Unit vector in the XY plane at the given angle from +X."""
    return np.array([math.cos(angle_rad), math.sin(angle_rad), 0.0])


def assert_vector_close(actual, expected, atol: float = 1e-9) -> None:
    assert actual is not None, "expected a vector, got None"
    assert np.allclose(actual, expected, atol=atol), f"{np.asarray(actual).tolist()} != {list(expected)}"
