"""Scratch field specifications and factory.

Scratch fields are temporary workspace reused across budget evaluations.
Their contents are overwritten on every call.

Current scratch fields:
- scratch_face: vertical fluxes at (Center, Center, Face)
- scratch_center: cell-centered products and divergences
"""

from tkebudget.core.grid import CCC, CCF, StaggeredGrid
from tkebudget.fields.base import FieldContainer, FieldRole, FieldSpec
from tkebudget.fields.field import Field


def create_scratch_specs() -> list[FieldSpec]:
    """Create specifications for scratch (temporary) fields.

    Returns:
        List of FieldSpec for the face and center buffers
    """
    return [
        FieldSpec(
            name="scratch_face",
            location=CCF,
            role=FieldRole.SCRATCH,
            description="Workspace for vertical fluxes",
        ),
        FieldSpec(
            name="scratch_center",
            location=CCC,
            role=FieldRole.SCRATCH,
            description="Workspace for cell-centered quantities",
        ),
    ]


class ScratchFields:
    """Convenience wrapper for accessing scratch fields.

    A ScratchFields instance must not be shared by concurrent budget
    evaluations.

    Example:
        scratch = create_scratch_fields(grid)
        options = TKEBudgetOptions(
            scratch_face=scratch.face, scratch_center=scratch.center
        )
    """

    def __init__(self, container: FieldContainer):
        """Initialize with field container.

        Args:
            container: Allocated FieldContainer with scratch fields
        """
        self._container = container

    @property
    def face(self) -> Field:
        """Workspace at (Center, Center, Face)."""
        return self._container["scratch_face"]

    @property
    def center(self) -> Field:
        """Workspace at cell centers."""
        return self._container["scratch_center"]


def create_scratch_container(grid: StaggeredGrid) -> FieldContainer:
    """Create an allocated container with the scratch fields."""
    container = FieldContainer(grid)
    container.register_many(create_scratch_specs())
    container.allocate()
    return container


def create_scratch_fields(grid: StaggeredGrid) -> ScratchFields:
    """Create ScratchFields for `grid`."""
    return ScratchFields(create_scratch_container(grid))
