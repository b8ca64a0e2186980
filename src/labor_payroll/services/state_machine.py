"""Payroll calculation approval state machine with transition validation."""

from __future__ import annotations

from datetime import datetime, timezone

from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.types import CalculationStatus
from labor_payroll.errors import InvalidInputError, InvalidStateTransitionError


class ApprovalStateMachine:
    """State machine for payroll calculation status transitions.

    Allowed transitions:
    - draft → pending_approval (submit)
    - pending_approval → approved (approve)
    - draft → approved (approve, unless submission is required)
    - approved → paid (mark paid)

    Paid is terminal and the record is immutable from then on. Nothing ever
    moves backwards. Methods return a new record and never persist; the
    caller writes the change with a status-guarded update.
    """

    # Define valid transitions: {from_status: [allowed_to_statuses]}
    VALID_TRANSITIONS: dict[CalculationStatus, list[CalculationStatus]] = {
        CalculationStatus.DRAFT: [CalculationStatus.PENDING_APPROVAL, CalculationStatus.APPROVED],
        CalculationStatus.PENDING_APPROVAL: [CalculationStatus.APPROVED],
        CalculationStatus.APPROVED: [CalculationStatus.PAID],
        CalculationStatus.PAID: [],  # Terminal state
    }

    # Position in the lifecycle; a transition must strictly increase it
    ORDER: dict[CalculationStatus, int] = {
        CalculationStatus.DRAFT: 0,
        CalculationStatus.PENDING_APPROVAL: 1,
        CalculationStatus.APPROVED: 2,
        CalculationStatus.PAID: 3,
    }

    def __init__(self, require_submission: bool = False):
        self.require_submission = require_submission

    def can_transition(self, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        try:
            from_status = CalculationStatus(from_status)
            to_status = CalculationStatus(to_status)
        except ValueError:
            return False

        if (
            self.require_submission
            and from_status == CalculationStatus.DRAFT
            and to_status == CalculationStatus.APPROVED
        ):
            return False
        return to_status in self.VALID_TRANSITIONS[from_status]

    def validate_transition(self, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidStateTransitionError if invalid."""
        if self.can_transition(from_status, to_status):
            return
        raise InvalidStateTransitionError(
            _status_value(from_status),
            _status_value(to_status),
            self._rejection_reason(from_status, to_status),
        )

    def _rejection_reason(self, from_status: str, to_status: str) -> str | None:
        try:
            from_status = CalculationStatus(from_status)
            to_status = CalculationStatus(to_status)
        except ValueError:
            return "unknown status"

        if from_status == CalculationStatus.PAID:
            return "paid calculations are immutable"
        if self.ORDER[to_status] <= self.ORDER[from_status]:
            return "status cannot move backwards or repeat"
        if to_status == CalculationStatus.APPROVED:
            return "calculation must be submitted for approval first"
        return None

    def get_next_statuses(self, current_status: str) -> list[CalculationStatus]:
        """Get list of valid next statuses from current status."""
        return [
            status
            for status in self.VALID_TRANSITIONS.get(CalculationStatus(current_status), [])
            if self.can_transition(current_status, status)
        ]

    def submit(self, calc: PayrollCalculation, now: datetime | None = None) -> PayrollCalculation:
        """Move a draft into pending approval."""
        self.validate_transition(calc.status, CalculationStatus.PENDING_APPROVAL)
        return calc.evolve(
            status=CalculationStatus.PENDING_APPROVAL,
            updated_at=now or datetime.now(timezone.utc),
        )

    def approve(
        self,
        calc: PayrollCalculation,
        approver_id: str,
        now: datetime | None = None,
    ) -> PayrollCalculation:
        """Approve a draft or pending record, recording who approved it and when."""
        if approver_id is None or not str(approver_id).strip():
            raise InvalidInputError("approver_id", approver_id, "approver identity is required")

        self.validate_transition(calc.status, CalculationStatus.APPROVED)
        now = now or datetime.now(timezone.utc)
        return calc.evolve(
            status=CalculationStatus.APPROVED,
            approved_by=str(approver_id).strip(),
            approved_at=now,
            updated_at=now,
        )

    def mark_paid(self, calc: PayrollCalculation, now: datetime | None = None) -> PayrollCalculation:
        """Mark an approved record as paid. The record is immutable afterwards."""
        self.validate_transition(calc.status, CalculationStatus.PAID)
        return calc.evolve(
            status=CalculationStatus.PAID,
            updated_at=now or datetime.now(timezone.utc),
        )


def _status_value(status: str) -> str:
    return status.value if isinstance(status, CalculationStatus) else str(status)
