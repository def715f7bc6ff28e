"""
Horizontal averaging of 3D fields into vertical profiles.

    F(k) = Σᵢⱼ Aᵢⱼ f(i, j, k) / Σᵢⱼ Aᵢⱼ

Aᵢⱼ is the horizontal area of the control volume at the field's x-y
staggering, so stretched horizontal grids get an area-weighted mean.
The vertical location of the input is kept.
"""

import logging

import numpy as np
import taichi as ti

from tkebudget.core.dtypes import NP_DTYPE
from tkebudget.core.grid import location_name, profile_location
from tkebudget.fields.field import Field
from tkebudget.operations.utils import ARRAY2, ARRAY3, prepare_output

logger = logging.getLogger(__name__)


@ti.kernel
def weighted_horizontal_sum(src: ARRAY3, weights: ARRAY2, dst: ARRAY3):
    """dst[0, 0, k] = Σᵢⱼ weights[i, j] * src[i, j, k]."""
    for k in range(dst.shape[2]):
        dst[0, 0, k] = 0.0

    for i, j, k in ti.ndrange(src.shape[0], src.shape[1], src.shape[2]):
        dst[0, 0, k] += weights[i, j] * src[i, j, k]


def horizontal_weights(field: Field) -> np.ndarray:
    """Normalised area weights for averaging `field` (sum to one)."""
    areas = field.grid.horizontal_areas(field.location)
    return np.ascontiguousarray(areas / areas.sum(), dtype=NP_DTYPE)


def average_horizontal(field: Field, out: Field | None = None) -> Field:
    """Average `field` over x and y.

    Args:
        field: 3D field (no reduced axes)
        out: Optional profile field to write into

    Returns:
        Profile field at (None, None, field.location[2])

    Raises:
        ValueError: If `field` is already horizontally reduced
    """
    if field.location[0] is None or field.location[1] is None:
        raise ValueError(
            f"Field '{field.name}' at {location_name(field.location)} "
            f"is already horizontally reduced"
        )

    dst = prepare_output(
        field.grid,
        profile_location(field.location[2]),
        out,
        name=f"<{field.name}>" if field.name else "",
    )
    weights = horizontal_weights(field)
    logger.debug(
        "Averaging '%s' at %s over %d horizontal cells",
        field.name,
        location_name(field.location),
        weights.size,
    )
    weighted_horizontal_sum(field.data, weights, dst.data)
    return dst
