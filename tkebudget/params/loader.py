"""
YAML files for DiagnosticsConfig.

A configuration file holds up to four groups, each optional:

    grid:
      nx: 64
      ny: 64
      nz: 32
      lz: 100.0
    buoyancy:
      thermal_expansion: 2.0e-4
    budget:
      include_flux_divergences: true
    execution:
      backend: cpu

Every runtime object is then built from the one file:

    config = load_config("budget.yaml")
    init_from_params(config.execution)
    model = create_model_state(config.grid.build())
    options = TKEBudgetOptions.from_params(config.budget)
"""

from pathlib import Path
from typing import Any

import yaml

from tkebudget.core.grid import StaggeredGrid
from tkebudget.params.schema import DiagnosticsConfig, ValidationError


def _read_groups(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Configuration must be a mapping of groups, got {type(data)}")
    return data


def load_config(
    path: str | Path, overrides: dict[str, dict[str, Any]] | None = None
) -> DiagnosticsConfig:
    """
    Load and validate a diagnostics configuration.

    Args:
        path: YAML file with any of the grid, buoyancy, budget, and
            execution groups
        overrides: Per-group values replacing those in the file, e.g.
            {"execution": {"debug": True}}

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If a group, key, or value is invalid
        yaml.YAMLError: If the YAML is malformed
    """
    data = _read_groups(Path(path))

    for group, values in (overrides or {}).items():
        if not isinstance(values, dict):
            raise ValidationError(f"Overrides for '{group}' must be a mapping")
        data[group] = {**(data.get(group) or {}), **values}

    return DiagnosticsConfig.from_dict(data)


def load_grid(path: str | Path) -> StaggeredGrid:
    """Grid described by the grid group of a configuration file."""
    return load_config(path).grid.build()


def save_config(config: DiagnosticsConfig, path: str | Path) -> None:
    """Write `config` as YAML, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
