"""
Turbulence quantities built from velocity fluctuations.

Fluctuations are deviations from the horizontal mean:

    u′ = u - U,  v′ = v - V,  w′ = w - W

Provides:
- velocity_fluctuations: (u′, v′, w′) at the velocity locations
- turbulent_kinetic_energy: e = ½ (u′² + v′² + w′²) at cell centers
- shear_production: -(w′u′) ∂z U - (w′v′) ∂z V at cell centers
"""

from tkebudget.core.grid import CCC
from tkebudget.fields.field import Field
from tkebudget.fields.state import Velocities
from tkebudget.operations.algebra import add, multiply, scale, subtract
from tkebudget.operations.averaging import average_horizontal
from tkebudget.operations.differencing import d_dz


def horizontal_means(velocities: Velocities) -> Velocities:
    """(U, V, W) profiles of the velocity components."""
    return Velocities(*(average_horizontal(c) for c in velocities))


def velocity_fluctuations(
    velocities: Velocities,
    U: Field,
    V: Field,
    W: Field | None = None,
) -> Velocities:
    """Subtract the horizontal-mean profiles from each component.

    Args:
        velocities: (u, v, w)
        U, V: Mean profiles of u and v
        W: Mean profile of w; computed when None

    Returns:
        (u′, v′, w′) at the same locations as (u, v, w)
    """
    u, v, w = velocities
    if W is None:
        W = average_horizontal(w)
    return Velocities(subtract(u, U), subtract(v, V), subtract(w, W))


def turbulent_kinetic_energy(
    velocities: Velocities,
    U: Field,
    V: Field,
    W: Field | None = None,
    out: Field | None = None,
) -> Field:
    """e = ½ (u′² + v′² + w′²) at cell centers.

    Each fluctuation is interpolated to cell centers before squaring,
    so e is non-negative everywhere.
    """
    u_prime, v_prime, w_prime = velocity_fluctuations(velocities, U, V, W)

    total = add(
        add(
            multiply(u_prime, u_prime, location=CCC),
            multiply(v_prime, v_prime, location=CCC),
        ),
        multiply(w_prime, w_prime, location=CCC),
    )
    return scale(total, 0.5, out=out)


def shear_production(
    velocities: Velocities,
    U: Field,
    V: Field,
    W: Field | None = None,
    out: Field | None = None,
) -> Field:
    """Production of TKE by vertical shear of the mean flow, at cell centers.

        SP = -(w′u′) ∂z U - (w′v′) ∂z V

    w′u′ lives at FCF and w′v′ at CFF, where the mean shear profiles sit
    on z faces; both terms are interpolated to centers after the product.
    """
    u_prime, v_prime, w_prime = velocity_fluctuations(velocities, U, V, W)

    x_term = multiply(multiply(w_prime, u_prime), d_dz(U))
    y_term = multiply(multiply(w_prime, v_prime), d_dz(V))

    return scale(add(x_term, y_term, location=CCC), -1.0, out=out)
