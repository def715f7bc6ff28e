"""Parameter schema with validation. Units: meters, seconds."""

from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from tkebudget.core.grid import StaggeredGrid


class ValidationError(ValueError):
    """Parameter validation failed."""
    pass


def _positive(value: float, name: str) -> None:
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")


def _non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")


def _one_of(value: str, choices: tuple[str, ...], name: str) -> None:
    if value not in choices:
        raise ValidationError(f"{name} must be one of {choices}, got {value!r}")


BACKENDS = ("cpu", "cuda", "vulkan")
DIVERGENCE_ORDERINGS = ("differentiate_then_average", "average_then_differentiate")


@dataclass(frozen=True)
class GridParams:
    """Grid: nx, ny, nz (cells), lx, ly, lz (extents [m]), optional z_faces [m]."""
    nx: int = 16
    ny: int = 16
    nz: int = 16
    lx: float = 1.0
    ly: float = 1.0
    lz: float = 1.0
    z_faces: list[float] | None = None

    def __post_init__(self) -> None:
        for name in ("nx", "ny", "nz"):
            if getattr(self, name) < 1:
                raise ValidationError(f"{name} must be >= 1, got {getattr(self, name)}")
        _positive(self.lx, "lx")
        _positive(self.ly, "ly")
        _positive(self.lz, "lz")
        if self.z_faces is not None:
            if len(self.z_faces) != self.nz + 1:
                raise ValidationError(
                    f"z_faces must have nz + 1 = {self.nz + 1} entries, "
                    f"got {len(self.z_faces)}"
                )
            if np.any(np.diff(self.z_faces) <= 0):
                raise ValidationError("z_faces must be strictly increasing")

    def build(self) -> StaggeredGrid:
        """Construct the StaggeredGrid these parameters describe."""
        if self.z_faces is None:
            return StaggeredGrid.uniform(
                self.nx, self.ny, self.nz, lx=self.lx, ly=self.ly, lz=self.lz
            )
        return StaggeredGrid(
            nx=self.nx,
            ny=self.ny,
            nz=self.nz,
            x_spacing=(self.lx / self.nx,) * self.nx,
            y_spacing=(self.ly / self.ny,) * self.ny,
            z_faces=tuple(self.z_faces),
        )


@dataclass(frozen=True)
class BuoyancyParams:
    """Linear equation of state: g [m/s²], thermal_expansion [1/°C], haline_contraction [kg/g]."""
    gravitational_acceleration: float = 9.80665
    thermal_expansion: float = 1.67e-4
    haline_contraction: float = 7.80e-4

    def __post_init__(self) -> None:
        _positive(self.gravitational_acceleration, "gravitational_acceleration")
        _non_negative(self.thermal_expansion, "thermal_expansion")
        _non_negative(self.haline_contraction, "haline_contraction")


@dataclass(frozen=True)
class BudgetParams:
    """Budget: include_flux_divergences, divergence_ordering."""
    include_flux_divergences: bool = False
    divergence_ordering: str = "differentiate_then_average"

    def __post_init__(self) -> None:
        _one_of(self.divergence_ordering, DIVERGENCE_ORDERINGS, "divergence_ordering")


@dataclass(frozen=True)
class ExecutionParams:
    """Execution: backend (cpu, cuda, vulkan), debug."""
    backend: str = "cpu"
    debug: bool = False

    def __post_init__(self) -> None:
        _one_of(self.backend, BACKENDS, "backend")


@dataclass(frozen=True)
class DiagnosticsConfig:
    """Complete diagnostics configuration."""

    grid: GridParams = field(default_factory=GridParams)
    buoyancy: BuoyancyParams = field(default_factory=BuoyancyParams)
    budget: BudgetParams = field(default_factory=BudgetParams)
    execution: ExecutionParams = field(default_factory=ExecutionParams)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "grid": asdict(self.grid),
            "buoyancy": asdict(self.buoyancy),
            "budget": asdict(self.budget),
            "execution": asdict(self.execution),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DiagnosticsConfig":
        """Create from nested dictionary."""
        param_classes = {
            "grid": GridParams,
            "buoyancy": BuoyancyParams,
            "budget": BudgetParams,
            "execution": ExecutionParams,
        }
        unknown = set(data) - set(param_classes)
        if unknown:
            raise ValidationError(f"Unknown parameter groups: {sorted(unknown)}")
        try:
            kwargs = {k: param_classes[k](**(data[k] or {})) for k in data}
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return cls(**kwargs)

    def with_updates(self, **kwargs: Any) -> "DiagnosticsConfig":
        """Create new config with updates."""
        current = self.to_dict()
        for key, value in kwargs.items():
            if key not in current:
                raise ValidationError(f"Unknown parameter group: {key}")
            if isinstance(value, dict):
                current[key].update(value)
            else:
                current[key] = asdict(value)
        return self.from_dict(current)
