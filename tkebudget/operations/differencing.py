"""
First derivatives by staggered finite differences.

A difference moves a field half a cell along the differentiated axis:

    Face -> Center:  ∂f/∂x[i] = (f[i+1] - f[i]) / Δx_c[i]
    Center -> Face:  ∂f/∂x[i] = (f[i] - f[i-1]) / (x_c[i] - x_c[i-1])

Periodic axes wrap. On the bounded z axis, the derivative at the two
boundary faces is zero (zero-gradient halo), matching interpolation.

d_dz applies equally to 3D fields and to horizontally averaged profiles.
"""

import numpy as np
import taichi as ti

from tkebudget.core.dtypes import NP_DTYPE
from tkebudget.core.grid import AXIS_NAMES, PERIODIC, Center, Face
from tkebudget.fields.field import Field
from tkebudget.operations.utils import ARRAY1, ARRAY3, along, prepare_output


@ti.kernel
def difference_to_center(
    src: ARRAY3,
    dst: ARRAY3,
    inverse_spacing: ARRAY1,
    axis: ti.template(),
    periodic: ti.template(),
):
    """Difference of adjacent faces, divided by the cell width."""
    n = src.shape[axis]

    for I in ti.grouped(dst):
        i = I[axis]
        hi = i + 1
        if ti.static(periodic):
            hi = hi % n
        dst[I] = (src[along(I, axis, hi)] - src[I]) * inverse_spacing[i]


@ti.kernel
def difference_to_face(
    src: ARRAY3,
    dst: ARRAY3,
    inverse_spacing: ARRAY1,
    axis: ti.template(),
    periodic: ti.template(),
):
    """Difference of adjacent centers, divided by their distance."""
    n = src.shape[axis]

    for I in ti.grouped(dst):
        i = I[axis]
        lo = i - 1
        hi = i
        if ti.static(periodic):
            lo = (i - 1 + n) % n
        else:
            lo = ti.max(i - 1, 0)
            hi = ti.min(i, n - 1)
        dst[I] = (src[along(I, axis, hi)] - src[along(I, axis, lo)]) * inverse_spacing[i]


DIFFERENCERS = {
    Center: difference_to_center,
    Face: difference_to_face,
}


def derivative(field: Field, axis: int, out: Field | None = None) -> Field:
    """First derivative of `field` along `axis`.

    Args:
        field: Field to differentiate; `axis` must not be reduced
        axis: 0 (x), 1 (y), or 2 (z)
        out: Optional destination at the shifted location

    Returns:
        Field whose location along `axis` is flipped (Face <-> Center)
    """
    source = field.location[axis]
    if source is None:
        raise ValueError(
            f"Cannot differentiate '{field.name}' along reduced axis {AXIS_NAMES[axis]}"
        )
    target = source.flip()

    location = list(field.location)
    location[axis] = target
    dst = prepare_output(
        field.grid, tuple(location), out, name=f"d{AXIS_NAMES[axis]}({field.name})"
    )

    weights = np.ascontiguousarray(
        field.grid.difference_weights(axis, target), dtype=NP_DTYPE
    )
    DIFFERENCERS[target](field.data, dst.data, weights, axis, PERIODIC[axis])
    return dst


def d_dx(field: Field, out: Field | None = None) -> Field:
    """∂/∂x (periodic)."""
    return derivative(field, 0, out=out)


def d_dy(field: Field, out: Field | None = None) -> Field:
    """∂/∂y (periodic)."""
    return derivative(field, 1, out=out)


def d_dz(field: Field, out: Field | None = None) -> Field:
    """∂/∂z, shifting the vertical location one staggering step.

    Works on full 3D fields and on vertical profiles alike.
    """
    return derivative(field, 2, out=out)
