"""Field management for the budget diagnostics.

Main classes:
- Field: Location-tagged array on a staggered grid
- FieldSpec: Declarative field specification
- FieldRole: Field categorization (STATE, DIAGNOSTIC, SCRATCH)
- FieldContainer: Allocates the fields of one grid

Convenience wrappers:
- Velocities: (u, v, w) tuple
- ModelState: Access to a model snapshot with optional diagnosed fields
- ScratchFields: Access to reusable workspace fields

Factory functions:
- center_field, xface_field, yface_field, zface_field, profile_field
- create_model_state, create_scratch_fields
"""

from tkebudget.fields.base import FieldContainer, FieldRole, FieldSpec
from tkebudget.fields.field import (
    Field,
    center_field,
    profile_field,
    xface_field,
    yface_field,
    zface_field,
)
from tkebudget.fields.scratch import (
    ScratchFields,
    create_scratch_container,
    create_scratch_fields,
    create_scratch_specs,
)
from tkebudget.fields.state import (
    ModelState,
    Velocities,
    create_diagnostic_specs,
    create_model_state,
    create_state_specs,
)

__all__ = [
    # Core classes
    "Field",
    "FieldContainer",
    "FieldRole",
    "FieldSpec",
    # Convenience wrappers
    "ModelState",
    "ScratchFields",
    "Velocities",
    # Factory functions
    "center_field",
    "xface_field",
    "yface_field",
    "zface_field",
    "profile_field",
    "create_state_specs",
    "create_diagnostic_specs",
    "create_model_state",
    "create_scratch_specs",
    "create_scratch_container",
    "create_scratch_fields",
]
