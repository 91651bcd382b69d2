"""Error kinds raised by the payroll core.

Every error is recoverable and carries the precondition that failed, so the
API layer can render it without inspecting the message.
"""

from __future__ import annotations

from typing import Any


class PayrollError(Exception):
    """Base class for payroll errors reported to callers."""

    code = "PAYROLL_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ValidationError(PayrollError):
    """Raised when request parameters are missing or malformed."""

    code = "VALIDATION_ERROR"


class NotFoundError(PayrollError):
    """Raised when a staff member or payroll run does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            {"entity": entity, "id": str(entity_id)},
        )


class ConflictError(PayrollError):
    """Raised when a payroll run already exists for a period."""

    code = "CONFLICT"
