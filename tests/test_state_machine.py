"""Tests for the approval state machine."""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from labor_payroll.calculators.engine import PayrollEngine
from labor_payroll.calculators.types import CalculationStatus
from labor_payroll.errors import InvalidInputError, InvalidStateTransitionError
from labor_payroll.services.state_machine import ApprovalStateMachine
from tests.factories import hourly_employee, make_request

CREATED = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
LATER = CREATED + timedelta(hours=2)

LIFECYCLE = ["draft", "pending_approval", "approved", "paid"]


@pytest.fixture
def draft():
    employee = hourly_employee("20.00")
    return PayrollEngine().run(
        make_request(employee.employee_id, regular_hours=40, overtime_hours=5),
        employee,
        now=CREATED,
    )


class TestTransitionTable:
    """Test that the transition table matches the lifecycle."""

    def test_valid_transitions(self):
        sm = ApprovalStateMachine()

        assert sm.can_transition("draft", "pending_approval") is True
        assert sm.can_transition("pending_approval", "approved") is True
        assert sm.can_transition("draft", "approved") is True
        assert sm.can_transition("approved", "paid") is True

    def test_invalid_transitions(self):
        sm = ApprovalStateMachine()

        # Can't go backwards
        assert sm.can_transition("pending_approval", "draft") is False
        assert sm.can_transition("approved", "pending_approval") is False
        assert sm.can_transition("paid", "approved") is False

        # Can't skip approval
        assert sm.can_transition("draft", "paid") is False
        assert sm.can_transition("pending_approval", "paid") is False

        # No self transitions
        assert sm.can_transition("approved", "approved") is False

        # Unknown statuses
        assert sm.can_transition("draft", "calculated") is False

    def test_require_submission_forbids_shortcut(self):
        sm = ApprovalStateMachine(require_submission=True)

        assert sm.can_transition("draft", "approved") is False
        assert sm.can_transition("pending_approval", "approved") is True
        assert sm.get_next_statuses("draft") == [CalculationStatus.PENDING_APPROVAL]

    def test_get_next_statuses(self):
        sm = ApprovalStateMachine()

        assert {s.value for s in sm.get_next_statuses("draft")} == {"pending_approval", "approved"}
        assert sm.get_next_statuses("approved") == ["paid"]
        assert sm.get_next_statuses("paid") == []

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            ApprovalStateMachine().validate_transition("paid", "approved")

        assert exc_info.value.from_status == "paid"
        assert exc_info.value.to_status == "approved"
        assert exc_info.value.reason == "paid calculations are immutable"


class TestTransitions:
    """Test record-level transitions."""

    def test_submit(self, draft):
        pending = ApprovalStateMachine().submit(draft, now=LATER)

        assert pending.status == CalculationStatus.PENDING_APPROVAL
        assert pending.updated_at == LATER
        assert pending.created_at == CREATED
        assert pending.approved_by is None
        assert draft.status == CalculationStatus.DRAFT  # original untouched

    def test_approve_from_pending(self, draft):
        sm = ApprovalStateMachine()
        approved = sm.approve(sm.submit(draft, now=CREATED), "supervisor-7", now=LATER)

        assert approved.status == CalculationStatus.APPROVED
        assert approved.approved_by == "supervisor-7"
        assert approved.approved_at == LATER
        assert approved.updated_at == LATER

    def test_approve_directly_from_draft(self, draft):
        approved = ApprovalStateMachine().approve(draft, "supervisor-7", now=LATER)
        assert approved.status == CalculationStatus.APPROVED

    def test_shortcut_blocked_when_submission_required(self, draft):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            ApprovalStateMachine(require_submission=True).approve(draft, "supervisor-7")
        assert exc_info.value.reason == "calculation must be submitted for approval first"

    def test_approve_twice_fails(self, draft):
        sm = ApprovalStateMachine()
        approved = sm.approve(draft, "supervisor-7", now=LATER)

        with pytest.raises(InvalidStateTransitionError):
            sm.approve(approved, "supervisor-8")
        assert approved.approved_by == "supervisor-7"

    def test_submit_only_from_draft(self, draft):
        sm = ApprovalStateMachine()
        pending = sm.submit(draft)

        with pytest.raises(InvalidStateTransitionError):
            sm.submit(pending)

    @pytest.mark.parametrize("approver", ["", "   ", None])
    def test_approver_required(self, draft, approver):
        with pytest.raises(InvalidInputError):
            ApprovalStateMachine().approve(draft, approver)

    def test_mark_paid(self, draft):
        sm = ApprovalStateMachine()
        paid = sm.mark_paid(sm.approve(draft, "supervisor-7", now=CREATED), now=LATER)

        assert paid.status == CalculationStatus.PAID
        assert paid.is_immutable
        assert paid.approved_by == "supervisor-7"
        assert paid.approved_at == CREATED
        assert paid.updated_at == LATER

    def test_mark_paid_requires_approval(self, draft):
        with pytest.raises(InvalidStateTransitionError):
            ApprovalStateMachine().mark_paid(draft)

    def test_paid_is_terminal(self, draft):
        sm = ApprovalStateMachine()
        paid = sm.mark_paid(sm.approve(draft, "supervisor-7"))

        for attempt in (sm.submit, sm.mark_paid, lambda c: sm.approve(c, "someone")):
            with pytest.raises(InvalidStateTransitionError):
                attempt(paid)

    def test_transitions_preserve_snapshot(self, draft):
        sm = ApprovalStateMachine()
        paid = sm.mark_paid(sm.approve(sm.submit(draft), "supervisor-7"))

        assert paid.snapshot_fields() == draft.snapshot_fields()


class TestMonotonicStatus:
    """Any sequence of operations yields an ordered subsequence of the lifecycle."""

    @given(ops=st.lists(st.sampled_from(["submit", "approve", "mark_paid"]), max_size=8))
    def test_status_history_is_monotonic(self, ops):
        employee = hourly_employee("20.00")
        calc = PayrollEngine().run(make_request(employee.employee_id, regular_hours=8), employee)
        sm = ApprovalStateMachine()
        history = [calc.status.value]

        for op in ops:
            try:
                if op == "approve":
                    calc = sm.approve(calc, "approver")
                else:
                    calc = getattr(sm, op)(calc)
            except InvalidStateTransitionError:
                continue
            history.append(calc.status.value)

        positions = [LIFECYCLE.index(s) for s in history]
        assert positions == sorted(set(positions))
