"""Tests for the SQLAlchemy repository and employee registry."""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from labor_payroll.calculators.engine import PayrollEngine
from labor_payroll.calculators.types import CalculationStatus
from labor_payroll.errors import PersistenceError
from labor_payroll.services.repository import (
    CalculationRepository,
    EmployeeRegistry,
    SqlAlchemyCalculationRepository,
    SqlAlchemyEmployeeRegistry,
)
from tests.factories import ALICE_ID, BOB_ID, CAROL_ID, DAVE_ID, FIXED_NOW, hourly_employee, make_request


def draft(employee_id=ALICE_ID, period_end=date(2024, 1, 13), **hours):
    employee = hourly_employee("20.00", employee_id=employee_id)
    request = make_request(
        employee_id,
        period_start=period_end - timedelta(days=6),
        period_end=period_end,
        **hours,
    )
    return PayrollEngine().run(request, employee, now=FIXED_NOW)


@pytest.fixture
def repository(session) -> SqlAlchemyCalculationRepository:
    return SqlAlchemyCalculationRepository(session)


class TestEmployeeRegistry:
    async def test_get_employee(self, session, employees):
        registry = SqlAlchemyEmployeeRegistry(session)

        alice = await registry.get_employee(ALICE_ID)

        assert alice.employee_id == ALICE_ID
        assert alice.base_rate == Decimal("20.00")
        assert alice.pay_type == "hourly"
        assert alice.name == "Alice Smith"

    async def test_unknown_employee(self, session, employees):
        registry = SqlAlchemyEmployeeRegistry(session)
        assert await registry.get_employee(uuid4()) is None

    async def test_list_active_skips_inactive(self, session, employees):
        registry = SqlAlchemyEmployeeRegistry(session)

        active = await registry.list_active()

        ids = {e.employee_id for e in active}
        assert ids == {ALICE_ID, BOB_ID, CAROL_ID}
        assert [e.name for e in active] == sorted(e.name for e in active)

    def test_satisfies_protocol(self, session):
        assert isinstance(SqlAlchemyEmployeeRegistry(session), EmployeeRegistry)


class TestCalculationRepository:
    async def test_insert_and_get(self, repository, employees):
        calc = draft(regular_hours=40, overtime_hours=5)

        calculation_id = await repository.insert(calc)
        stored = await repository.get_by_id(calculation_id)

        assert stored.id == calculation_id
        assert stored.status == CalculationStatus.DRAFT
        assert stored.gross_pay == Decimal("950.00")
        assert stored.net_pay == Decimal("715.82")
        assert stored.overtime_rate == Decimal("30.00")

    async def test_get_missing(self, repository, employees):
        assert await repository.get_by_id(DAVE_ID) is None

    async def test_conditional_update(self, repository, employees):
        calculation_id = await repository.insert(draft(regular_hours=8))

        applied = await repository.update_status(
            calculation_id,
            CalculationStatus.DRAFT,
            CalculationStatus.APPROVED,
            updated_at=FIXED_NOW,
            approver_id="supervisor-7",
            approved_at=FIXED_NOW,
        )

        assert applied is True
        stored = await repository.get_by_id(calculation_id)
        assert stored.status == CalculationStatus.APPROVED
        assert stored.approved_by == "supervisor-7"

    async def test_stale_expected_status_changes_nothing(self, repository, employees):
        calculation_id = await repository.insert(draft(regular_hours=8))
        await repository.update_status(
            calculation_id,
            CalculationStatus.DRAFT,
            CalculationStatus.PENDING_APPROVAL,
            updated_at=FIXED_NOW,
        )

        applied = await repository.update_status(
            calculation_id,
            CalculationStatus.DRAFT,
            CalculationStatus.APPROVED,
            updated_at=FIXED_NOW,
            approver_id="supervisor-7",
            approved_at=FIXED_NOW,
        )

        assert applied is False
        stored = await repository.get_by_id(calculation_id)
        assert stored.status == CalculationStatus.PENDING_APPROVAL
        assert stored.approved_by is None

    async def test_list_orders_by_period_end(self, repository, employees):
        older = await repository.insert(draft(period_end=date(2024, 1, 6), regular_hours=8))
        newer = await repository.insert(draft(period_end=date(2024, 1, 20), regular_hours=8))
        middle = await repository.insert(draft(BOB_ID, period_end=date(2024, 1, 13), regular_hours=8))

        calcs = await repository.list_by_status()

        assert [c.id for c in calcs] == [newer, middle, older]

    async def test_list_filters_by_status(self, repository, employees):
        keep = await repository.insert(draft(regular_hours=8))
        other = await repository.insert(draft(BOB_ID, regular_hours=8))
        await repository.update_status(
            other,
            CalculationStatus.DRAFT,
            CalculationStatus.PENDING_APPROVAL,
            updated_at=FIXED_NOW,
        )

        drafts = await repository.list_by_status(CalculationStatus.DRAFT)
        pending = await repository.list_by_status(CalculationStatus.PENDING_APPROVAL)

        assert [c.id for c in drafts] == [keep]
        assert [c.id for c in pending] == [other]

    async def test_database_error_is_wrapped(self, session):
        repository = SqlAlchemyCalculationRepository(session)
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("gone")))

        with pytest.raises(PersistenceError) as exc_info:
            await repository.list_by_status()

        assert exc_info.value.operation == "list_by_status"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_insert_keeps_snapshot(self, repository, employees):
        calc = draft(regular_hours=40, vacation_hours=8)

        stored = await repository.get_by_id(await repository.insert(calc))

        assert stored.vacation_hours == Decimal("8")
        assert stored.total_hours == Decimal("48")
        assert stored.total_taxes == calc.total_taxes

    def test_satisfies_protocol(self, session):
        assert isinstance(SqlAlchemyCalculationRepository(session), CalculationRepository)
