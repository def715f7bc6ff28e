"""Exceptions raised by the TKE budget diagnostics.

All errors signal a caller contract violation: the computation is a pure
function of a state snapshot, so nothing here is worth retrying.
"""


class TKEBudgetError(Exception):
    """Base class for budget diagnostic errors."""


class GridMismatchError(TKEBudgetError, ValueError):
    """Fields (or scratch buffers) participating in one call live on different grids."""


class LocationMismatchError(TKEBudgetError, ValueError):
    """A field is not located where the computation needs it."""


class MissingInputError(TKEBudgetError, KeyError):
    """A required input field is absent and cannot be derived."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable
        return str(self.args[0]) if self.args else ""


class UnsupportedExecutionTargetError(TKEBudgetError, RuntimeError):
    """The active backend cannot run the reduction kernels."""


class BufferAliasError(TKEBudgetError, ValueError):
    """A model input shares its storage with a scratch buffer."""
