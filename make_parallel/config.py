"""
Built-in constants for make_parallel.

Values here are module-level so that project configuration
(``make_parallel.project_config.apply_config_to_globals``) can override
them in place. Consumers read them at call time through the module
(``from make_parallel import config as cfg; cfg.PARALLEL_TOLERANCE_RAD``).
"""

import math

# ---------------------------------------------------------------------------
# Rotation calculation
# ---------------------------------------------------------------------------

# Below this XY angle two directions are treated as already parallel.
# Comparison is strict: an angle of exactly this value still rotates.
PARALLEL_TOLERANCE_RAD = 0.001  # ~0.057°

# A line has no forward/backward sense: angles above this are folded by pi.
FOLD_THRESHOLD_RAD = math.pi / 2

# Default tolerance for the are_parallel() diagnostic check.
PARALLEL_CHECK_TOLERANCE_DEG = 0.1

# Vectors shorter than this cannot be normalized.
ZERO_LENGTH_EPS = 1e-9

# ---------------------------------------------------------------------------
# Direction extraction
# ---------------------------------------------------------------------------

# Normalized curve parameter used as an element's representative point.
CURVE_MIDPOINT_PARAMETER = 0.5

# Number of view slots on an elevation marker.
ELEVATION_MARKER_SLOTS = 4

# Categories whose curve-based elements use MEP-style direction extraction.
MEP_CATEGORY_NAMES = (
    "OST_PipeCurves",
    "OST_DuctCurves",
    "OST_CableTray",
    "OST_Conduit",
    "OST_FlexPipeCurves",
    "OST_FlexDuctCurves",
    "OST_PipeAccessory",
    "OST_PipeFitting",
    "OST_DuctAccessory",
    "OST_DuctFitting",
    "OST_CableTrayFitting",
    "OST_ConduitFitting",
)
