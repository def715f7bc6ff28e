"""Model state: velocities, tracers, and diagnosed fields.

A ModelState is a snapshot of the simulation the budget is computed from.
Velocities are always present; pressure, buoyancy, tracers, and eddy
viscosity are registered on demand, so the budget can tell which inputs
it must derive and which are missing.
"""

from typing import NamedTuple

from tkebudget.core.grid import CCC, CCF, CFC, FCC, StaggeredGrid
from tkebudget.fields.base import FieldContainer, FieldRole, FieldSpec
from tkebudget.fields.field import Field


class Velocities(NamedTuple):
    """Staggered velocity components (u at FCC, v at CFC, w at CCF)."""

    u: Field
    v: Field
    w: Field


TRACER_NAMES = ("temperature", "salinity")


def create_state_specs(tracers: tuple[str, ...] = ()) -> list[FieldSpec]:
    """Create specifications for prognostic fields.

    Args:
        tracers: Subset of TRACER_NAMES to register

    Returns:
        List of FieldSpec for u, v, w and the requested tracers
    """
    unknown = set(tracers) - set(TRACER_NAMES)
    if unknown:
        raise ValueError(f"Unknown tracers: {sorted(unknown)}")

    specs = [
        FieldSpec("u", FCC, FieldRole.STATE, "x-velocity [m/s]"),
        FieldSpec("v", CFC, FieldRole.STATE, "y-velocity [m/s]"),
        FieldSpec("w", CCF, FieldRole.STATE, "z-velocity [m/s]"),
    ]
    descriptions = {
        "temperature": "Temperature [°C]",
        "salinity": "Salinity [g/kg]",
    }
    for name in tracers:
        specs.append(FieldSpec(name, CCC, FieldRole.STATE, descriptions[name]))
    return specs


def create_diagnostic_specs(
    pressure: bool = True,
    split_pressure: bool = False,
    buoyancy: bool = True,
    eddy_viscosity: bool = True,
) -> list[FieldSpec]:
    """Create specifications for diagnosed fields.

    Args:
        pressure: Register a total kinematic pressure field
        split_pressure: Register hydrostatic and non-hydrostatic parts
        buoyancy: Register a buoyancy field
        eddy_viscosity: Register a subfilter eddy viscosity field

    Returns:
        List of FieldSpec at cell centers
    """
    specs = []
    if pressure:
        specs.append(
            FieldSpec("pressure", CCC, FieldRole.DIAGNOSTIC, "Kinematic pressure [m²/s²]")
        )
    if split_pressure:
        specs.append(
            FieldSpec(
                "hydrostatic_pressure",
                CCC,
                FieldRole.DIAGNOSTIC,
                "Hydrostatic pressure anomaly [m²/s²]",
            )
        )
        specs.append(
            FieldSpec(
                "nonhydrostatic_pressure",
                CCC,
                FieldRole.DIAGNOSTIC,
                "Non-hydrostatic pressure [m²/s²]",
            )
        )
    if buoyancy:
        specs.append(FieldSpec("buoyancy", CCC, FieldRole.DIAGNOSTIC, "Buoyancy [m/s²]"))
    if eddy_viscosity:
        specs.append(
            FieldSpec(
                "eddy_viscosity", CCC, FieldRole.DIAGNOSTIC, "Eddy viscosity [m²/s]"
            )
        )
    return specs


class ModelState:
    """Convenience wrapper for the fields of a model snapshot.

    Missing optional fields read as None.

    Example:
        model = create_model_state(grid, buoyancy=False, tracers=("temperature",))
        model.u.from_numpy(u_values)
        model.buoyancy  # None, derive from temperature
    """

    def __init__(self, container: FieldContainer):
        """Initialize with field container.

        Args:
            container: Allocated FieldContainer holding at least u, v, w
        """
        self._container = container

    @property
    def container(self) -> FieldContainer:
        return self._container

    @property
    def grid(self) -> StaggeredGrid:
        return self._container.grid

    def _optional(self, name: str) -> Field | None:
        if name in self._container:
            return self._container[name]
        return None

    @property
    def u(self) -> Field:
        return self._container["u"]

    @property
    def v(self) -> Field:
        return self._container["v"]

    @property
    def w(self) -> Field:
        return self._container["w"]

    @property
    def velocities(self) -> Velocities:
        return Velocities(self.u, self.v, self.w)

    @property
    def pressure(self) -> Field | None:
        """Total kinematic pressure, if the model stores it."""
        return self._optional("pressure")

    @property
    def hydrostatic_pressure(self) -> Field | None:
        return self._optional("hydrostatic_pressure")

    @property
    def nonhydrostatic_pressure(self) -> Field | None:
        return self._optional("nonhydrostatic_pressure")

    @property
    def buoyancy(self) -> Field | None:
        return self._optional("buoyancy")

    @property
    def temperature(self) -> Field | None:
        return self._optional("temperature")

    @property
    def salinity(self) -> Field | None:
        return self._optional("salinity")

    @property
    def eddy_viscosity(self) -> Field | None:
        return self._optional("eddy_viscosity")


def create_model_state(
    grid: StaggeredGrid,
    pressure: bool = True,
    split_pressure: bool = False,
    buoyancy: bool = True,
    eddy_viscosity: bool = True,
    tracers: tuple[str, ...] = (),
) -> ModelState:
    """Create a ModelState with zero-initialised fields.

    Args:
        grid: Grid of the model
        pressure: Store total pressure
        split_pressure: Store hydrostatic and non-hydrostatic pressure
        buoyancy: Store a diagnosed buoyancy field
        eddy_viscosity: Store an eddy viscosity field
        tracers: Tracers to store (temperature, salinity)

    Returns:
        ModelState over an allocated container
    """
    container = FieldContainer(grid)
    container.register_many(create_state_specs(tracers))
    container.register_many(
        create_diagnostic_specs(
            pressure=pressure,
            split_pressure=split_pressure,
            buoyancy=buoyancy,
            eddy_viscosity=eddy_viscosity,
        )
    )
    container.allocate()
    return ModelState(container)
