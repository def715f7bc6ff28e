"""
Parameter management for the budget diagnostics.

This module provides:
- Validated, immutable parameter containers (schema.py)
- YAML loading utilities (loader.py)
"""

from tkebudget.params.schema import (
    BuoyancyParams,
    BudgetParams,
    DiagnosticsConfig,
    ExecutionParams,
    GridParams,
    ValidationError,
)
from tkebudget.params.loader import (
    load_config,
    load_grid,
    save_config,
)

__all__ = [
    # Schema classes
    "GridParams",
    "BuoyancyParams",
    "BudgetParams",
    "ExecutionParams",
    "DiagnosticsConfig",
    "ValidationError",
    # Loader functions
    "load_config",
    "load_grid",
    "save_config",
]
