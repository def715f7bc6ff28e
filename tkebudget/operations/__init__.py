"""
Taichi kernels and field operations for the budget diagnostics.

Submodules:
- interpolation: Center <-> Face interpolation table
- algebra: Pointwise arithmetic with automatic interpolation
- averaging: Area-weighted horizontal means
- differencing: Staggered first derivatives
- turbulence: Fluctuations, TKE, shear production
- dissipation: Viscous dissipation estimator
- buoyancy: Linear equation of state
- protocol: Interfaces for swappable components
"""

from tkebudget.operations.algebra import add, at, multiply, scale, subtract
from tkebudget.operations.averaging import average_horizontal
from tkebudget.operations.buoyancy import linear_buoyancy
from tkebudget.operations.differencing import d_dx, d_dy, d_dz, derivative
from tkebudget.operations.dissipation import ViscousDissipation, strain_rate_squared
from tkebudget.operations.interpolation import interpolate
from tkebudget.operations.protocol import DissipationEstimator, DivergenceOrdering
from tkebudget.operations.turbulence import (
    horizontal_means,
    shear_production,
    turbulent_kinetic_energy,
    velocity_fluctuations,
)

__all__ = [
    "add",
    "subtract",
    "multiply",
    "scale",
    "at",
    "interpolate",
    "average_horizontal",
    "derivative",
    "d_dx",
    "d_dy",
    "d_dz",
    "horizontal_means",
    "velocity_fluctuations",
    "turbulent_kinetic_energy",
    "shear_production",
    "strain_rate_squared",
    "ViscousDissipation",
    "DissipationEstimator",
    "DivergenceOrdering",
    "linear_buoyancy",
]
