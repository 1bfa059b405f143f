"""
Host category identifiers.

Values mirror the host's built-in category ids so that snapshots exported
from a live model can be classified without translation.
"""

from enum import IntEnum
from typing import FrozenSet, Optional, Union

from make_parallel import config as cfg


class BuiltInCategory(IntEnum):
    """Subset of the host's built-in categories used by make_parallel."""
    # MEP curves
    OST_PipeCurves = -2008044
    OST_DuctCurves = -2008000
    OST_CableTray = -2008130
    OST_Conduit = -2008132
    OST_FlexPipeCurves = -2008050
    OST_FlexDuctCurves = -2008020
    # MEP fittings and accessories
    OST_PipeAccessory = -2008055
    OST_PipeFitting = -2008049
    OST_DuctAccessory = -2008016
    OST_DuctFitting = -2008010
    OST_CableTrayFitting = -2008126
    OST_ConduitFitting = -2008128
    # Datum and annotation
    OST_Grids = -2000220
    OST_CLines = -2000083  # reference planes
    OST_Lines = -2000051
    OST_Viewers = -2000279
    # Model
    OST_Walls = -2000011
    OST_Doors = -2000023
    OST_Windows = -2000014
    OST_GenericModel = -2000151
    OST_StructuralFraming = -2001320
    OST_StructuralColumns = -2001330


CategoryLike = Union[BuiltInCategory, int, str]


def parse_category(value: Optional[CategoryLike]) -> Optional[Union[BuiltInCategory, int]]:
    """Map a category name or id to ``BuiltInCategory``.

    Unknown integer ids are kept as plain ints: a model may use categories
    this module does not enumerate.

    Raises:
        ValueError: for an unknown category name
    """
    if value is None:
        return None
    if isinstance(value, BuiltInCategory):
        return value
    if isinstance(value, str):
        try:
            return BuiltInCategory[value]
        except KeyError:
            raise ValueError(f"Unknown category name: {value!r}") from None
    try:
        return BuiltInCategory(int(value))
    except ValueError:
        return int(value)


def mep_categories() -> FrozenSet[int]:
    """Category ids that qualify for MEP-style direction extraction."""
    return frozenset(BuiltInCategory[name].value for name in cfg.MEP_CATEGORY_NAMES)


def is_mep_category(category: Optional[CategoryLike]) -> bool:
    if category is None:
        return False
    try:
        parsed = parse_category(category)
    except ValueError:
        return False
    return int(parsed) in mep_categories()
