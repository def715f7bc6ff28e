"""Staggered grid geometry and field locations.

This module centralizes all spatial layout logic:
- Location: where a quantity is sampled along one axis (cell center or face)
- Location tuples: the (x, y, z) staggering of the model variables
- StaggeredGrid: immutable rectilinear grid, periodic in x and y, bounded in z

Staggering of the model variables ("C-grid"):

    u  at (Face,   Center, Center)   FCC
    v  at (Center, Face,   Center)   CFC
    w  at (Center, Center, Face)     CCF
    p, b, tracers, eddy viscosity at cell centers (CCC)

Node counts per axis:

    periodic x, y:  n centers, n faces (face i sits west/south of center i)
    bounded z:      nz centers, nz + 1 faces (face k sits below center k)

A reduced axis (after horizontal averaging) has location None and length 1.
"""

from dataclasses import dataclass
from enum import Enum, auto

import numpy as np

from tkebudget.core.dtypes import NP_DTYPE


class Location(Enum):
    """Sampling location of a field along one axis."""

    CENTER = auto()
    FACE = auto()

    def flip(self) -> "Location":
        """The other staggered location (one half-cell shift)."""
        return Location.FACE if self is Location.CENTER else Location.CENTER

    @property
    def short(self) -> str:
        return "C" if self is Location.CENTER else "F"


Center = Location.CENTER
Face = Location.FACE

CCC = (Center, Center, Center)
FCC = (Face, Center, Center)
CFC = (Center, Face, Center)
CCF = (Center, Center, Face)
FFC = (Face, Face, Center)
FCF = (Face, Center, Face)
CFF = (Center, Face, Face)

# Axis topology: x and y wrap around, z has walls
PERIODIC: tuple[bool, bool, bool] = (True, True, False)

AXIS_NAMES = ("x", "y", "z")


def location_name(location: tuple) -> str:
    """Compact label such as 'CCF' or '··C' for a location tuple."""
    return "".join("·" if loc is None else loc.short for loc in location)


def profile_location(vertical: Location) -> tuple:
    """Location tuple of a horizontally reduced field."""
    return (None, None, vertical)


@dataclass(frozen=True)
class StaggeredGrid:
    """Immutable staggered grid specification.

    Attributes:
        nx: Number of cells in x
        ny: Number of cells in y
        nz: Number of cells in z
        x_spacing: Cell widths in x [m], one per cell
        y_spacing: Cell widths in y [m], one per cell
        z_faces: Vertical face coordinates [m], nz + 1 strictly increasing values

    Horizontal widths may vary from cell to cell; averages then become
    area weighted. Grids compare equal when all of the above match.
    """

    nx: int
    ny: int
    nz: int
    x_spacing: tuple[float, ...]
    y_spacing: tuple[float, ...]
    z_faces: tuple[float, ...]

    def __post_init__(self):
        """Validate dimensions and coordinates."""
        for name in ("nx", "ny", "nz"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")

        # Normalise sequences so equality and hashing behave
        for name in ("x_spacing", "y_spacing", "z_faces"):
            object.__setattr__(
                self, name, tuple(float(v) for v in getattr(self, name))
            )

        if len(self.x_spacing) != self.nx:
            raise ValueError(
                f"x_spacing must have nx={self.nx} entries, got {len(self.x_spacing)}"
            )
        if len(self.y_spacing) != self.ny:
            raise ValueError(
                f"y_spacing must have ny={self.ny} entries, got {len(self.y_spacing)}"
            )
        if len(self.z_faces) != self.nz + 1:
            raise ValueError(
                f"z_faces must have nz + 1={self.nz + 1} entries, got {len(self.z_faces)}"
            )
        if min(self.x_spacing) <= 0 or min(self.y_spacing) <= 0:
            raise ValueError("Horizontal spacings must be > 0")
        if np.any(np.diff(self.z_faces) <= 0):
            raise ValueError("z_faces must be strictly increasing")

    @classmethod
    def uniform(
        cls,
        nx: int,
        ny: int,
        nz: int,
        lx: float = 1.0,
        ly: float = 1.0,
        lz: float = 1.0,
    ) -> "StaggeredGrid":
        """Regular grid on [0, lx) x [0, ly) x [-lz, 0]."""
        if lx <= 0 or ly <= 0 or lz <= 0:
            raise ValueError(f"Domain extents must be > 0, got ({lx}, {ly}, {lz})")
        return cls(
            nx=nx,
            ny=ny,
            nz=nz,
            x_spacing=(lx / nx,) * nx,
            y_spacing=(ly / ny,) * ny,
            z_faces=tuple(np.linspace(-lz, 0.0, nz + 1)),
        )

    @property
    def size(self) -> tuple[int, int, int]:
        """Number of cells per axis."""
        return (self.nx, self.ny, self.nz)

    @property
    def lx(self) -> float:
        return float(sum(self.x_spacing))

    @property
    def ly(self) -> float:
        return float(sum(self.y_spacing))

    @property
    def lz(self) -> float:
        return self.z_faces[-1] - self.z_faces[0]

    def shape(self, location: tuple) -> tuple[int, int, int]:
        """Array shape of a field at `location`.

        Args:
            location: (x, y, z) tuple of Location or None (reduced axis)

        Returns:
            Number of nodes per axis
        """
        shape = []
        for axis, loc in enumerate(location):
            if loc is None:
                shape.append(1)
            elif loc is Face and not PERIODIC[axis]:
                shape.append(self.size[axis] + 1)
            else:
                shape.append(self.size[axis])
        return tuple(shape)

    def nodes(self, axis: int, location: Location) -> np.ndarray:
        """Coordinates of the nodes at `location` along `axis`."""
        if axis == 2:
            faces = np.asarray(self.z_faces, dtype=NP_DTYPE)
            if location is Face:
                return faces
            return 0.5 * (faces[:-1] + faces[1:])

        spacing = self._horizontal_spacing(axis)
        faces = np.concatenate(([0.0], np.cumsum(spacing)[:-1]))
        if location is Face:
            return faces
        return faces + 0.5 * spacing

    def widths(self, axis: int, location: Location) -> np.ndarray:
        """Extent of the control volume around each node.

        Center nodes own the cell between two faces. Face nodes own the
        span between the two neighboring centers; on the bounded z axis
        the boundary faces own half a cell.
        """
        if location is Center:
            if axis == 2:
                return np.diff(np.asarray(self.z_faces, dtype=NP_DTYPE))
            return self._horizontal_spacing(axis)

        centers = self.nodes(axis, Center)
        if axis == 2:
            faces = self.nodes(2, Face)
            return np.concatenate(
                (
                    [centers[0] - faces[0]],
                    np.diff(centers),
                    [faces[-1] - centers[-1]],
                )
            )

        length = self.lx if axis == 0 else self.ly
        previous = np.roll(centers, 1)
        previous[0] -= length
        return centers - previous

    def horizontal_areas(self, location: tuple) -> np.ndarray:
        """Horizontal cell areas [m²] for the x-y staggering of `location`."""
        if location[0] is None or location[1] is None:
            raise ValueError(
                f"Field at {location_name(location)} is already horizontally reduced"
            )
        return np.outer(self.widths(0, location[0]), self.widths(1, location[1]))

    def difference_weights(self, axis: int, target: Location) -> np.ndarray:
        """Inverse node spacing for a first difference that lands on `target`.

        A difference of face values lands on centers and divides by the cell
        width. A difference of center values lands on faces and divides by
        the center-to-center distance. Bounded boundary faces get weight 0,
        which makes the derivative vanish there (zero-gradient halo).
        """
        if target is Center:
            return 1.0 / self.widths(axis, Center)

        if axis == 2:
            weights = np.zeros(self.nz + 1, dtype=NP_DTYPE)
            weights[1:-1] = 1.0 / np.diff(self.nodes(2, Center))
            return weights

        return 1.0 / self.widths(axis, Face)

    def _horizontal_spacing(self, axis: int) -> np.ndarray:
        spacing = self.x_spacing if axis == 0 else self.y_spacing
        return np.asarray(spacing, dtype=NP_DTYPE)
