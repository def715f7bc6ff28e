"""
tkebudget: horizontally averaged turbulent kinetic energy budgets using Taichi.

Computes the terms of the TKE budget of a staggered-grid fluid simulation
snapshot as vertical profiles.
"""

__version__ = "0.1.0"

from tkebudget.budget import (
    BUDGET_KEYS,
    FLUX_DIVERGENCE_KEYS,
    TKEBudgetOptions,
    compute_tke_budget,
    turbulent_kinetic_energy_budget,
)
from tkebudget.errors import (
    BufferAliasError,
    GridMismatchError,
    LocationMismatchError,
    MissingInputError,
    TKEBudgetError,
    UnsupportedExecutionTargetError,
)

__all__ = [
    "BUDGET_KEYS",
    "FLUX_DIVERGENCE_KEYS",
    "TKEBudgetOptions",
    "compute_tke_budget",
    "turbulent_kinetic_energy_budget",
    "TKEBudgetError",
    "BufferAliasError",
    "GridMismatchError",
    "LocationMismatchError",
    "MissingInputError",
    "UnsupportedExecutionTargetError",
]
