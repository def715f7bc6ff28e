"""
Staggered-grid interpolation between cell centers and cell faces.

One step moves a field half a cell along one axis:

    Face -> Center:  c[i] = (f[i] + f[i+1]) / 2
    Center -> Face:  f[i] = (c[i-1] + c[i]) / 2

Periodic axes wrap around. On the bounded z axis the two boundary faces
take the adjacent center value (zero-gradient halo).

Kernels are looked up in INTERPOLATORS by (source, target) location, and
interpolate() chains one step per axis that needs it.
"""

import logging

import taichi as ti

from tkebudget.core.grid import PERIODIC, Center, Face, Location, location_name
from tkebudget.fields.field import Field
from tkebudget.operations.utils import ARRAY3, along, prepare_output

logger = logging.getLogger(__name__)


@ti.kernel
def face_to_center(
    src: ARRAY3, dst: ARRAY3, axis: ti.template(), periodic: ti.template()
):
    """Average adjacent faces onto the center between them."""
    n = src.shape[axis]

    for I in ti.grouped(dst):
        hi = I[axis] + 1
        if ti.static(periodic):
            hi = hi % n
        dst[I] = 0.5 * (src[I] + src[along(I, axis, hi)])


@ti.kernel
def center_to_face(
    src: ARRAY3, dst: ARRAY3, axis: ti.template(), periodic: ti.template()
):
    """Average adjacent centers onto the face between them."""
    n = src.shape[axis]

    for I in ti.grouped(dst):
        i = I[axis]
        lo = i - 1
        hi = i
        if ti.static(periodic):
            lo = (i - 1 + n) % n
        else:
            # Boundary faces see the same center twice
            lo = ti.max(i - 1, 0)
            hi = ti.min(i, n - 1)
        dst[I] = 0.5 * (src[along(I, axis, lo)] + src[along(I, axis, hi)])


INTERPOLATORS = {
    (Face, Center): face_to_center,
    (Center, Face): center_to_face,
}


def interpolate_axis(
    field: Field, axis: int, target: Location, out: Field | None = None
) -> Field:
    """Move `field` to `target` along one axis.

    Args:
        field: Field to interpolate
        axis: 0, 1, or 2
        target: Location along `axis`
        out: Optional destination field

    Returns:
        Field at the new location (`field` itself if nothing moves and no
        `out` was given)
    """
    source = field.location[axis]
    if source is None:
        raise ValueError(f"Cannot interpolate along reduced axis {axis}")

    location = list(field.location)
    location[axis] = target
    location = tuple(location)

    if source is target:
        if out is None:
            return field
        dst = prepare_output(field.grid, location, out)
        dst.data[...] = field.data
        return dst

    dst = prepare_output(field.grid, location, out, name=field.name)
    kernel = INTERPOLATORS[(source, target)]
    kernel(field.data, dst.data, axis, PERIODIC[axis])
    return dst


def interpolate(field: Field, location: tuple, out: Field | None = None) -> Field:
    """Evaluate `field` at `location`, one axis at a time.

    Reduced axes stay reduced: `location` must hold None exactly where the
    field is already reduced.

    Returns:
        Field at `location` (`field` itself if already there and no `out`)
    """
    location = tuple(location)
    for axis, (have, want) in enumerate(zip(field.location, location)):
        if (have is None) != (want is None):
            raise ValueError(
                f"Cannot interpolate {location_name(field.location)} to "
                f"{location_name(location)}: reduced axes must match"
            )

    moves = [
        axis
        for axis, (have, want) in enumerate(zip(field.location, location))
        if have is not want
    ]
    if not moves:
        return interpolate_axis(field, 2, location[2], out=out)

    logger.debug(
        "Interpolating '%s' from %s to %s",
        field.name,
        location_name(field.location),
        location_name(location),
    )
    result = field
    for n, axis in enumerate(moves):
        last = n == len(moves) - 1
        result = interpolate_axis(
            result, axis, location[axis], out=out if last else None
        )
    return result
