"""
Viscous dissipation of resolved kinetic energy.

    ϵ = 2 νₑ Σᵢⱼ Σᵢⱼ,    Σᵢⱼ = ½ (∂ⱼuᵢ + ∂ᵢuⱼ)

Each strain component is formed at its natural staggered location:

    Σ₁₁, Σ₂₂, Σ₃₃   CCC
    Σ₁₂             FFC
    Σ₁₃             FCF
    Σ₂₃             CFF

and its square is interpolated to cell centers before summation.
"""

import logging

from tkebudget.core.grid import CCC
from tkebudget.fields.field import Field
from tkebudget.fields.state import Velocities
from tkebudget.operations.algebra import add, at, multiply, scale
from tkebudget.operations.differencing import d_dx, d_dy, d_dz
from tkebudget.operations.utils import check_location, check_same_grid

logger = logging.getLogger(__name__)


def _squared_at_centers(component: Field) -> Field:
    return at(CCC, multiply(component, component))


def _off_diagonal(a: Field, b: Field) -> Field:
    return scale(add(a, b), 0.5)


def strain_rate_squared(velocities: Velocities) -> Field:
    """Σᵢⱼ Σᵢⱼ at cell centers."""
    u, v, w = velocities

    diagonal = add(
        add(_squared_at_centers(d_dx(u)), _squared_at_centers(d_dy(v))),
        _squared_at_centers(d_dz(w)),
    )

    sigma_12 = _off_diagonal(d_dy(u), d_dx(v))
    sigma_13 = _off_diagonal(d_dz(u), d_dx(w))
    sigma_23 = _off_diagonal(d_dz(v), d_dy(w))
    off_diagonal = add(
        add(_squared_at_centers(sigma_12), _squared_at_centers(sigma_13)),
        _squared_at_centers(sigma_23),
    )

    # Off-diagonal components appear twice in the double contraction
    return add(diagonal, scale(off_diagonal, 2.0))


class ViscousDissipation:
    """Dissipation estimator ϵ = 2 νₑ Σᵢⱼ Σᵢⱼ.

    Implements the DissipationEstimator protocol.

    Example:
        estimator = ViscousDissipation()
        epsilon = estimator(model.velocities, model.eddy_viscosity)
    """

    def __call__(
        self,
        velocities: Velocities,
        eddy_viscosity: Field,
        out: Field | None = None,
    ) -> Field:
        grid = check_same_grid(*velocities, eddy_viscosity, out)
        check_location(eddy_viscosity, CCC, "Eddy viscosity")
        logger.debug("Computing viscous dissipation on %s cells", grid.size)

        strain = strain_rate_squared(velocities)
        product = multiply(eddy_viscosity, strain)
        return scale(product, 2.0, out=out)
