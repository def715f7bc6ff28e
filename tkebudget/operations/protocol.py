"""
Protocol definitions for swappable budget components.

Protocols define the interface a pluggable implementation must satisfy,
so the budget assembler can take alternatives without changing its
orchestration code.
"""

from enum import Enum, auto
from typing import Protocol, runtime_checkable

from tkebudget.fields.field import Field
from tkebudget.fields.state import Velocities


class DivergenceOrdering(Enum):
    """How flux divergence profiles are formed.

    DIFFERENTIATE_THEN_AVERAGE: ⟨∂z F⟩, differentiate the 3D flux first
    AVERAGE_THEN_DIFFERENTIATE: ∂z ⟨F⟩, differentiate the averaged profile

    The two agree whenever the horizontal weights do not depend on depth,
    which holds for every StaggeredGrid; the second is cheaper.
    """

    DIFFERENTIATE_THEN_AVERAGE = auto()
    AVERAGE_THEN_DIFFERENTIATE = auto()

    @classmethod
    def from_name(cls, name: str) -> "DivergenceOrdering":
        """Parse a lowercase configuration name."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown divergence ordering: {name!r}") from None


@runtime_checkable
class DissipationEstimator(Protocol):
    """Protocol for subfilter dissipation estimators.

    Computes ϵ at cell centers from the resolved velocities and the
    subfilter eddy viscosity.
    """

    def __call__(
        self,
        velocities: Velocities,
        eddy_viscosity: Field,
        out: Field | None = None,
    ) -> Field:
        """Estimate the dissipation rate.

        Args:
            velocities: (u, v, w) at FCC, CFC, CCF
            eddy_viscosity: νₑ at cell centers
            out: Optional CCC destination

        Returns:
            ϵ at (Center, Center, Center)
        """
        ...
