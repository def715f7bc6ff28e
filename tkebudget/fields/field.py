"""Location-tagged fields on a staggered grid.

A Field couples a contiguous float64 array with the grid it lives on and
its (x, y, z) location. The array is passed straight into Taichi kernels
as an external ndarray, so kernels write into it in place.

Usage:
    grid = StaggeredGrid.uniform(16, 16, 8)
    w = zface_field(grid, name="w")
    w.from_numpy(np.random.randn(*w.shape))
    w.value_at(0, 0, 8)  # top face
"""

from typing import Any

import numpy as np

from tkebudget.core.dtypes import NP_DTYPE
from tkebudget.core.grid import (
    CCC,
    CCF,
    CFC,
    FCC,
    Center,
    Location,
    StaggeredGrid,
    location_name,
    profile_location,
)


class Field:
    """Array of values sampled at one staggered location of a grid.

    Attributes:
        grid: Grid the field is defined on
        location: (x, y, z) tuple of Location, None on reduced axes
        data: Backing array of shape grid.shape(location)
        name: Optional label used in error messages
    """

    def __init__(
        self,
        grid: StaggeredGrid,
        location: tuple,
        data: np.ndarray | None = None,
        name: str = "",
    ):
        location = tuple(location)
        if len(location) != 3:
            raise ValueError(f"Location must have 3 entries, got {location}")
        for loc in location:
            if loc is not None and not isinstance(loc, Location):
                raise TypeError(f"Invalid location entry: {loc!r}")
        if location[2] is None:
            raise ValueError("The vertical axis cannot be reduced")

        shape = grid.shape(location)
        if data is None:
            data = np.zeros(shape, dtype=NP_DTYPE)
        else:
            data = np.ascontiguousarray(data, dtype=NP_DTYPE)
            if data.shape != shape:
                raise ValueError(
                    f"Data shape {data.shape} does not match {shape} "
                    f"for location {location_name(location)}"
                )

        self._grid = grid
        self._location = location
        self._data = data
        self.name = name

    @property
    def grid(self) -> StaggeredGrid:
        return self._grid

    @property
    def location(self) -> tuple:
        return self._location

    @property
    def data(self) -> np.ndarray:
        """Backing array (shared, not a copy)."""
        return self._data

    @property
    def shape(self) -> tuple[int, int, int]:
        return self._data.shape

    @property
    def is_profile(self) -> bool:
        """True if both horizontal axes are reduced."""
        return self._location[0] is None and self._location[1] is None

    def value_at(self, i: int, j: int = 0, k: int = 0) -> float:
        """Value stored at node (i, j, k)."""
        return float(self._data[i, j, k])

    def to_numpy(self) -> np.ndarray:
        """Copy of the field values."""
        return self._data.copy()

    def from_numpy(self, values: Any) -> None:
        """Overwrite values in place, broadcasting against the field shape.

        A 1D array of vertical length sets a horizontally uniform field.
        """
        self._data[...] = np.broadcast_to(
            np.asarray(values, dtype=NP_DTYPE), self._data.shape
        )

    def fill(self, value: float) -> None:
        """Set all values to a constant."""
        self._data.fill(value)

    def copy(self, name: str | None = None) -> "Field":
        """Deep copy on the same grid and location."""
        return Field(
            self._grid,
            self._location,
            data=self._data.copy(),
            name=self.name if name is None else name,
        )

    def profile(self) -> np.ndarray:
        """Vertical values of a horizontally reduced field.

        Raises:
            ValueError: If the field still varies horizontally
        """
        if not self.is_profile:
            raise ValueError(
                f"Field '{self.name}' at {location_name(self._location)} is not a profile"
            )
        return self._data[0, 0, :].copy()

    def __repr__(self) -> str:
        return (
            f"Field({self.name!r}, location={location_name(self._location)}, "
            f"shape={self.shape})"
        )


def center_field(grid: StaggeredGrid, name: str = "") -> Field:
    """Zero field at cell centers (CCC)."""
    return Field(grid, CCC, name=name)


def xface_field(grid: StaggeredGrid, name: str = "") -> Field:
    """Zero field on x faces (FCC), the location of u."""
    return Field(grid, FCC, name=name)


def yface_field(grid: StaggeredGrid, name: str = "") -> Field:
    """Zero field on y faces (CFC), the location of v."""
    return Field(grid, CFC, name=name)


def zface_field(grid: StaggeredGrid, name: str = "") -> Field:
    """Zero field on z faces (CCF), the location of w and vertical fluxes."""
    return Field(grid, CCF, name=name)


def profile_field(
    grid: StaggeredGrid, vertical: Location = Center, name: str = ""
) -> Field:
    """Zero vertical profile (horizontally reduced field)."""
    return Field(grid, profile_location(vertical), name=name)
