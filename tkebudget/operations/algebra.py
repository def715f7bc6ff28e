"""
Pointwise field algebra with automatic staggered-grid interpolation.

Binary operations pick a common location per axis:
- the explicitly requested location, if given
- otherwise the shared location, or Face where the operands differ

Both operands are interpolated to that location before the pointwise
operation. A reduced (horizontally averaged) axis broadcasts, so profiles
combine directly with 3D fields:

    u_prime = subtract(u, U)        # FCC minus ··C profile -> FCC
    flux = multiply(w, e)           # CCF times CCC -> CCF
    b_flux = multiply(w, b, CCC)    # same product evaluated at centers

Every operation returns a new Field unless an `out` field is given.
"""

import taichi as ti

from tkebudget.core.dtypes import DTYPE
from tkebudget.core.grid import Face, location_name
from tkebudget.fields.field import Field
from tkebudget.operations.interpolation import interpolate
from tkebudget.operations.utils import ARRAY3, check_same_grid, prepare_output

ADD = 0
SUBTRACT = 1
MULTIPLY = 2


@ti.kernel
def binary_op(a: ARRAY3, b: ARRAY3, dst: ARRAY3, op: ti.template()):
    """dst = a (op) b with broadcasting over length-1 axes of a and b."""
    a_max = ti.Vector([a.shape[0] - 1, a.shape[1] - 1, a.shape[2] - 1])
    b_max = ti.Vector([b.shape[0] - 1, b.shape[1] - 1, b.shape[2] - 1])

    for I in ti.grouped(dst):
        x = a[ti.min(I, a_max)]
        y = b[ti.min(I, b_max)]
        if ti.static(op == ADD):
            dst[I] = x + y
        elif ti.static(op == SUBTRACT):
            dst[I] = x - y
        else:
            dst[I] = x * y


@ti.kernel
def scale_op(src: ARRAY3, dst: ARRAY3, factor: DTYPE):
    """dst = factor * src."""
    for I in ti.grouped(dst):
        dst[I] = factor * src[I]


def common_location(a: Field, b: Field, location: tuple | None = None) -> tuple:
    """Location at which a binary operation on `a` and `b` is evaluated."""
    if location is not None:
        location = tuple(location)
        for axis, want in enumerate(location):
            reduced = a.location[axis] is None and b.location[axis] is None
            if (want is None) != reduced:
                raise ValueError(
                    f"Requested location {location_name(location)} is incompatible "
                    f"with operands at {location_name(a.location)} and "
                    f"{location_name(b.location)}"
                )
        return location

    result = []
    for la, lb in zip(a.location, b.location):
        if la is None:
            result.append(lb)
        elif lb is None or la is lb:
            result.append(la)
        else:
            result.append(Face)
    return tuple(result)


def _operand_at(field: Field, location: tuple) -> Field:
    # Reduced axes of the operand stay reduced and broadcast in the kernel
    target = tuple(
        None if have is None else want for have, want in zip(field.location, location)
    )
    return interpolate(field, target)


def _binary(
    a: Field,
    b: Field,
    op: int,
    location: tuple | None,
    out: Field | None,
    name: str,
) -> Field:
    grid = check_same_grid(a, b)
    target = common_location(a, b, location)
    a_at = _operand_at(a, target)
    b_at = _operand_at(b, target)
    dst = prepare_output(grid, target, out, name=name)
    binary_op(a_at.data, b_at.data, dst.data, op)
    return dst


def add(
    a: Field, b: Field, location: tuple | None = None, out: Field | None = None
) -> Field:
    """Pointwise a + b."""
    return _binary(a, b, ADD, location, out, f"{a.name}+{b.name}")


def subtract(
    a: Field, b: Field, location: tuple | None = None, out: Field | None = None
) -> Field:
    """Pointwise a - b."""
    return _binary(a, b, SUBTRACT, location, out, f"{a.name}-{b.name}")


def multiply(
    a: Field, b: Field, location: tuple | None = None, out: Field | None = None
) -> Field:
    """Pointwise a * b.

    Args:
        a, b: Operands on the same grid
        location: Optional location to evaluate the product at
        out: Optional destination field at the result location

    Returns:
        Product field

    Raises:
        GridMismatchError: If a and b live on different grids
    """
    return _binary(a, b, MULTIPLY, location, out, f"{a.name}*{b.name}")


def scale(field: Field, factor: float, out: Field | None = None) -> Field:
    """Pointwise factor * field."""
    dst = prepare_output(field.grid, field.location, out, name=field.name)
    scale_op(field.data, dst.data, float(factor))
    return dst


def at(location: tuple, field: Field, out: Field | None = None) -> Field:
    """Evaluate `field` at `location`, interpolating as needed.

    Always returns a field at `location`; this is `field` itself when it
    is already there and no `out` is given.
    """
    if out is not None:
        check_same_grid(field, out)
    return interpolate(field, location, out=out)
