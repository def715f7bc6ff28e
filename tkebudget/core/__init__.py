"""Core infrastructure: types, grid geometry, and locations."""

from tkebudget.core.dtypes import DTYPE, NP_DTYPE
from tkebudget.core.grid import (
    AXIS_NAMES,
    CCC,
    CCF,
    CFC,
    CFF,
    FCC,
    FCF,
    FFC,
    PERIODIC,
    Center,
    Face,
    Location,
    StaggeredGrid,
    location_name,
    profile_location,
)

__all__ = [
    "DTYPE",
    "NP_DTYPE",
    "AXIS_NAMES",
    "PERIODIC",
    "Location",
    "Center",
    "Face",
    "CCC",
    "CCF",
    "CFC",
    "CFF",
    "FCC",
    "FCF",
    "FFC",
    "StaggeredGrid",
    "location_name",
    "profile_location",
]
