"""Base field container and specification classes.

This module provides the foundation for declarative field management:
- FieldSpec: Describes a field's name, location, and role
- FieldRole: Enum categorizing field usage patterns
- FieldContainer: Allocates and hands out the Fields of one grid

Usage:
    container = FieldContainer(grid)
    container.register(FieldSpec("w", CCF, FieldRole.STATE))
    container.allocate()
    w = container["w"]
"""

from dataclasses import dataclass
from enum import Enum, auto

from tkebudget.core.dtypes import NP_DTYPE
from tkebudget.core.grid import StaggeredGrid
from tkebudget.fields.field import Field


class FieldRole(Enum):
    """Categorizes field usage patterns for documentation and validation.

    STATE: Prognostic model variables (u, v, w, tracers)
    DIAGNOSTIC: Quantities the model diagnoses from its state (p, b, nu_e)
    SCRATCH: Reusable workspace for intermediate computations
    """

    STATE = auto()
    DIAGNOSTIC = auto()
    SCRATCH = auto()


@dataclass(frozen=True)
class FieldSpec:
    """Immutable specification for a grid field.

    Attributes:
        name: Field identifier (snake_case)
        location: (x, y, z) staggering of the field
        role: Field usage category
        description: Human-readable description with units
    """

    name: str
    location: tuple
    role: FieldRole
    description: str = ""

    def __post_init__(self):
        """Validate field specification."""
        if not self.name:
            raise ValueError("Field name cannot be empty")
        if not self.name.islower() or not self.name.replace("_", "").isalnum():
            raise ValueError(f"Field name must be snake_case, got: {self.name}")
        if len(self.location) != 3 or any(loc is None for loc in self.location):
            raise ValueError(
                f"Field '{self.name}' needs a full 3D location, got {self.location}"
            )


class FieldContainer:
    """Manages the Fields of one grid via declarative specifications.

    Fields are registered via FieldSpec, then allocated together.

    Attributes:
        grid: Grid every field is allocated on
        field_names: Registered field names
        allocated: Whether fields have been allocated

    Example:
        container = FieldContainer(StaggeredGrid.uniform(16, 16, 8))
        container.register(FieldSpec("u", FCC, FieldRole.STATE))
        container.allocate()
        u = container["u"]
    """

    def __init__(self, grid: StaggeredGrid):
        """Initialize container with a grid.

        Args:
            grid: Grid all fields live on
        """
        self._grid = grid
        self._specs: dict[str, FieldSpec] = {}
        self._fields: dict[str, Field] = {}
        self._allocated = False

    @property
    def grid(self) -> StaggeredGrid:
        """Get the grid."""
        return self._grid

    @property
    def allocated(self) -> bool:
        """Check if fields have been allocated."""
        return self._allocated

    @property
    def field_names(self) -> list[str]:
        """Get list of registered field names."""
        return list(self._specs.keys())

    def register(self, spec: FieldSpec) -> None:
        """Register a field specification.

        Args:
            spec: Field specification to register

        Raises:
            ValueError: If name already registered
            RuntimeError: If fields already allocated
        """
        if self._allocated:
            raise RuntimeError("Cannot register fields after allocation")
        if spec.name in self._specs:
            raise ValueError(f"Field '{spec.name}' already registered")
        self._specs[spec.name] = spec

    def register_many(self, specs: list[FieldSpec]) -> None:
        """Register multiple field specifications."""
        for spec in specs:
            self.register(spec)

    def allocate(self) -> None:
        """Allocate all registered fields (zero initialised).

        Raises:
            RuntimeError: If already allocated or no fields registered
        """
        if self._allocated:
            raise RuntimeError("Fields already allocated")
        if not self._specs:
            raise RuntimeError("No fields registered")

        for name, spec in self._specs.items():
            self._fields[name] = Field(self._grid, spec.location, name=name)

        self._allocated = True

    def get(self, name: str) -> Field:
        """Get a field by name.

        Raises:
            KeyError: If field not found
            RuntimeError: If fields not allocated
        """
        if not self._allocated:
            raise RuntimeError("Fields not yet allocated")
        if name not in self._fields:
            raise KeyError(f"Field '{name}' not found")
        return self._fields[name]

    def __getitem__(self, name: str) -> Field:
        """Get a field by name using bracket notation."""
        return self.get(name)

    def get_spec(self, name: str) -> FieldSpec:
        """Get the specification for a field."""
        if name not in self._specs:
            raise KeyError(f"Field '{name}' not registered")
        return self._specs[name]

    def fields_by_role(self, role: FieldRole) -> list[str]:
        """Get field names filtered by role."""
        return [name for name, spec in self._specs.items() if spec.role == role]

    @property
    def memory_bytes(self) -> int:
        """Total memory held by allocated fields in bytes."""
        if not self._allocated:
            return 0
        itemsize = NP_DTYPE().itemsize
        return sum(field.data.size * itemsize for field in self._fields.values())

    @property
    def memory_mb(self) -> float:
        """Total memory usage in megabytes."""
        return self.memory_bytes / (1024 * 1024)

    def __contains__(self, name: str) -> bool:
        """Check if a field is registered."""
        return name in self._specs

    def __len__(self) -> int:
        """Number of registered fields."""
        return len(self._specs)
