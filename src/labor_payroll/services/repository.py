"""Persistence ports and their SQLAlchemy implementations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.types import CalculationStatus, EmployeeRecord
from labor_payroll.errors import PersistenceError
from labor_payroll.models import Employee, PayrollCalculationRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class EmployeeRegistry(Protocol):
    """Read-only source of employee pay profiles."""

    async def get_employee(self, employee_id: UUID) -> EmployeeRecord | None:
        """Return the employee, or None if unknown."""
        ...

    async def list_active(self) -> list[EmployeeRecord]:
        """Return all active employees."""
        ...


@runtime_checkable
class CalculationRepository(Protocol):
    """Store for payroll calculations.

    ``update_status`` must be a conditional write: it only applies when the
    stored status still equals ``expected_from_status`` and reports whether
    a row changed.
    """

    async def insert(self, calc: PayrollCalculation) -> UUID:
        ...

    async def update_status(
        self,
        calculation_id: UUID,
        expected_from_status: CalculationStatus,
        to_status: CalculationStatus,
        *,
        updated_at: datetime,
        approver_id: str | None = None,
        approved_at: datetime | None = None,
    ) -> bool:
        ...

    async def get_by_id(self, calculation_id: UUID) -> PayrollCalculation | None:
        ...

    async def list_by_status(
        self, status: CalculationStatus | None = None
    ) -> list[PayrollCalculation]:
        ...


class SqlAlchemyEmployeeRegistry:
    """Employee registry backed by the ``employee`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee(self, employee_id: UUID) -> EmployeeRecord | None:
        try:
            employee = await self.session.get(Employee, employee_id)
        except SQLAlchemyError as e:
            raise PersistenceError("get_employee", str(e)) from e
        return employee.to_record() if employee else None

    async def list_active(self) -> list[EmployeeRecord]:
        try:
            result = await self.session.execute(
                select(Employee).where(Employee.status == "active").order_by(Employee.name)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("list_active", str(e)) from e
        return [e.to_record() for e in result.scalars().all()]


class SqlAlchemyCalculationRepository:
    """Calculation repository backed by the ``payroll_calculation`` table.

    Writes are flushed, not committed; the session owner commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, calc: PayrollCalculation) -> UUID:
        record = PayrollCalculationRecord.from_domain(calc)
        try:
            self.session.add(record)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to insert payroll calculation for %s", calc.employee_id)
            raise PersistenceError("insert", str(e)) from e
        return record.calculation_id

    async def update_status(
        self,
        calculation_id: UUID,
        expected_from_status: CalculationStatus,
        to_status: CalculationStatus,
        *,
        updated_at: datetime,
        approver_id: str | None = None,
        approved_at: datetime | None = None,
    ) -> bool:
        values: dict[str, object] = {
            "status": CalculationStatus(to_status).value,
            "updated_at": updated_at,
        }
        if approver_id is not None:
            values["approved_by"] = approver_id
            values["approved_at"] = approved_at

        stmt = (
            update(PayrollCalculationRecord)
            .where(
                PayrollCalculationRecord.calculation_id == calculation_id,
                PayrollCalculationRecord.status == CalculationStatus(expected_from_status).value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to update status of calculation %s", calculation_id)
            raise PersistenceError("update_status", str(e)) from e
        return (result.rowcount or 0) == 1

    async def get_by_id(self, calculation_id: UUID) -> PayrollCalculation | None:
        try:
            result = await self.session.execute(
                select(PayrollCalculationRecord)
                .where(PayrollCalculationRecord.calculation_id == calculation_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("get_by_id", str(e)) from e
        record = result.scalar_one_or_none()
        return record.to_domain() if record else None

    async def list_by_status(
        self, status: CalculationStatus | None = None
    ) -> list[PayrollCalculation]:
        query = select(PayrollCalculationRecord).execution_options(populate_existing=True)
        if status is not None:
            query = query.where(
                PayrollCalculationRecord.status == CalculationStatus(status).value
            )
        query = query.order_by(
            PayrollCalculationRecord.period_end.desc(),
            PayrollCalculationRecord.created_at.desc(),
        )
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise PersistenceError("list_by_status", str(e)) from e
        return [record.to_domain() for record in result.scalars().all()]
