"""
Buoyancy from a linear equation of state.

    b = g (α T - β S)

Used when a model snapshot carries tracers but no diagnosed buoyancy.
"""

from tkebudget.core.grid import CCC
from tkebudget.errors import MissingInputError
from tkebudget.fields.field import Field
from tkebudget.operations.algebra import add, scale
from tkebudget.operations.utils import check_location, check_same_grid
from tkebudget.params.schema import BuoyancyParams


def linear_buoyancy(
    params: BuoyancyParams,
    temperature: Field | None = None,
    salinity: Field | None = None,
    out: Field | None = None,
) -> Field:
    """Buoyancy at cell centers from temperature and/or salinity.

    A missing tracer contributes nothing.

    Raises:
        MissingInputError: If neither tracer is given
    """
    if temperature is None and salinity is None:
        raise MissingInputError(
            "Buoyancy needs temperature or salinity to apply the equation of state"
        )
    check_same_grid(temperature, salinity, out)
    for tracer, role in ((temperature, "Temperature"), (salinity, "Salinity")):
        if tracer is not None:
            check_location(tracer, CCC, role)

    g = params.gravitational_acceleration
    if salinity is None:
        return scale(temperature, g * params.thermal_expansion, out=out)
    if temperature is None:
        return scale(salinity, -g * params.haline_contraction, out=out)
    return add(
        scale(temperature, g * params.thermal_expansion),
        scale(salinity, -g * params.haline_contraction),
        out=out,
    )
