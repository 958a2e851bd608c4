# ==============================================
# Errors
# ==============================================
#
# - ValidationError  → request rejected before any key selection runs
# - PlanStoreError   → a generated plan could not be saved or loaded
#
# Everything else the modeler notices (unresolved tenant field,
# low-cardinality keys, sort/prefix conflicts) is reported as a
# warning string in the response, never raised.
#
# ==============================================

from typing import Optional


class ValidationError(ValueError):
    """Raised when an entity (or the whole batch) cannot be modeled."""

    def __init__(self, message: str, entity_name: Optional[str] = None):
        super().__init__(message)
        self.entity_name = entity_name


class PlanStoreError(RuntimeError):
    """Raised when the plan store fails to read or write a plan."""
