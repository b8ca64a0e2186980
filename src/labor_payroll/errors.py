"""Error kinds raised by the payroll engine.

Every failure path raises one of these; the HTTP layer maps ``code`` to a
status and callers map it to a user message.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


class PayrollError(Exception):
    """Base class for all payroll engine errors."""

    code = "PAYROLL_ERROR"

    def context(self) -> dict[str, Any]:
        """Return structured context for error responses."""
        return {}


class InvalidInputError(PayrollError):
    """Raised when a request field is missing, non-numeric or out of range."""

    code = "INVALID_INPUT"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{field}' ({value!r}): {reason}")

    def context(self) -> dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class InvalidPeriodError(PayrollError):
    """Raised when a pay period ends before it starts."""

    code = "INVALID_PERIOD"

    def __init__(self, period_start: Any, period_end: Any):
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(f"Pay period end {period_end} is before start {period_start}")

    def context(self) -> dict[str, Any]:
        return {"period_start": str(self.period_start), "period_end": str(self.period_end)}


class NotFoundError(PayrollError):
    """Raised when a referenced employee or calculation does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: UUID | str | None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")

    def context(self) -> dict[str, Any]:
        return {"entity": self.entity, "id": str(self.entity_id)}


class EmployeeNotFoundError(NotFoundError):
    def __init__(self, employee_id: UUID | str | None):
        super().__init__("Employee", employee_id)


class CalculationNotFoundError(NotFoundError):
    def __init__(self, calculation_id: UUID | str | None):
        super().__init__("Payroll calculation", calculation_id)


class UnsupportedPayTypeError(PayrollError):
    """Raised when a non-hourly employee is submitted for hour-based pay."""

    code = "UNSUPPORTED_PAY_TYPE"

    def __init__(self, employee_id: UUID | str, pay_type: str):
        self.employee_id = employee_id
        self.pay_type = pay_type
        super().__init__(
            f"Employee {employee_id} has pay type '{pay_type}'; "
            "only hourly employees can be calculated from hours"
        )

    def context(self) -> dict[str, Any]:
        return {"employee_id": str(self.employee_id), "pay_type": self.pay_type}


class InvalidStateTransitionError(PayrollError):
    """Raised when a status change is not allowed from the current status."""

    code = "INVALID_STATE_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)

    def context(self) -> dict[str, Any]:
        ctx: dict[str, Any] = {"from_status": self.from_status, "to_status": self.to_status}
        if self.reason:
            ctx["reason"] = self.reason
        return ctx


class PersistenceError(PayrollError):
    """Raised when the calculation store fails. Not retried by the engine."""

    code = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Repository {operation} failed: {detail}")

    def context(self) -> dict[str, Any]:
        return {"operation": self.operation}


class InvariantViolationError(PayrollError):
    """Raised when an assembled record breaks a calculation invariant.

    This indicates an engine defect, never a bad request.
    """

    code = "INVARIANT_VIOLATION"

    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__("Payroll calculation invariant violated: " + "; ".join(violations))

    def context(self) -> dict[str, Any]:
        return {"violations": list(self.violations)}
