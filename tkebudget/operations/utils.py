"""Shared argument checks and Taichi array types for the operations."""

import taichi as ti

from tkebudget.core.dtypes import DTYPE
from tkebudget.core.grid import StaggeredGrid, location_name
from tkebudget.errors import GridMismatchError, LocationMismatchError
from tkebudget.fields.field import Field

# External array arguments: fields hand their numpy storage to the kernels
ARRAY1 = ti.types.ndarray(dtype=DTYPE, ndim=1)
ARRAY2 = ti.types.ndarray(dtype=DTYPE, ndim=2)
ARRAY3 = ti.types.ndarray(dtype=DTYPE, ndim=3)


@ti.func
def along(I, axis: ti.template(), m):
    """Copy of grid index I with its `axis` component set to m."""
    J = I
    J[axis] = m
    return J


def check_same_grid(*fields: Field | None) -> StaggeredGrid:
    """Return the common grid of `fields`, ignoring None entries.

    Raises:
        GridMismatchError: If two fields live on different grids
    """
    present = [f for f in fields if f is not None]
    if not present:
        raise ValueError("No fields given")

    grid = present[0].grid
    for field in present[1:]:
        if field.grid != grid:
            raise GridMismatchError(
                f"Field '{field.name}' is defined on a different grid than "
                f"'{present[0].name}'"
            )
    return grid


def check_location(field: Field, expected: tuple, role: str) -> None:
    """Raise LocationMismatchError unless `field` sits at `expected`."""
    if field.location != tuple(expected):
        raise LocationMismatchError(
            f"{role} must be located at {location_name(expected)}, "
            f"got {location_name(field.location)}"
        )


def prepare_output(
    grid: StaggeredGrid, location: tuple, out: Field | None = None, name: str = ""
) -> Field:
    """Allocate a result field, or validate a caller-supplied one.

    Raises:
        GridMismatchError: If `out` lives on another grid
        LocationMismatchError: If `out` is not at `location`
    """
    if out is None:
        return Field(grid, location, name=name)
    if out.grid != grid:
        raise GridMismatchError(f"Output field '{out.name}' is on a different grid")
    check_location(out, location, f"Output field '{out.name}'")
    return out
