"""Payroll calculation and approval service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import UUID

from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.engine import PayrollEngine
from labor_payroll.calculators.summary import PayrollSummary, summarize
from labor_payroll.calculators.types import CalculationRequest, CalculationStatus
from labor_payroll.errors import CalculationNotFoundError, InvalidStateTransitionError
from labor_payroll.services.repository import CalculationRepository, EmployeeRegistry
from labor_payroll.services.state_machine import ApprovalStateMachine

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PayrollService:
    """Service for calculating payroll and moving records through approval.

    Calculation:
    1. Validate the request (no I/O before this succeeds)
    2. Look up the employee
    3. Run the pure engine pipeline
    4. Insert the draft record (one repository call)

    Transitions:
    1. Load the record (NotFound if missing)
    2. Let the state machine produce the new record
    3. Apply it with a status-guarded update; zero rows means another
       writer got there first and the request fails as an invalid transition
    """

    def __init__(
        self,
        repository: CalculationRepository,
        employees: EmployeeRegistry,
        engine: PayrollEngine | None = None,
        state_machine: ApprovalStateMachine | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repository = repository
        self.employees = employees
        self.engine = engine or PayrollEngine()
        self.state_machine = state_machine or ApprovalStateMachine()
        self.clock = clock

    async def calculate(self, request: CalculationRequest) -> PayrollCalculation:
        """Calculate pay for one employee and period and store it as a draft."""
        prepared = self.engine.prepare(request)

        employee = await self.employees.get_employee(prepared.hours.employee_id)
        calc = self.engine.calculate(prepared, employee, now=self.clock())

        if calc.net_pay < 0:
            logger.warning(
                "Negative net pay %s for employee %s (%s to %s): other deductions %s exceed remaining gross",
                calc.net_pay,
                calc.employee_id,
                calc.period_start,
                calc.period_end,
                calc.other_deductions,
            )

        calculation_id = await self.repository.insert(calc)
        calc = calc.evolve(id=calculation_id)
        logger.info(
            "Created payroll calculation %s for employee %s: gross=%s net=%s",
            calculation_id,
            calc.employee_id,
            calc.gross_pay,
            calc.net_pay,
        )
        return calc

    async def get(self, calculation_id: UUID) -> PayrollCalculation:
        calc = await self.repository.get_by_id(calculation_id)
        if calc is None:
            raise CalculationNotFoundError(calculation_id)
        return calc

    async def list_calculations(
        self, status: CalculationStatus | None = None
    ) -> list[PayrollCalculation]:
        return await self.repository.list_by_status(status)

    async def summary(self, disbursed_only: bool = False) -> PayrollSummary:
        return summarize(await self.repository.list_by_status(None), disbursed_only=disbursed_only)

    async def submit(self, calculation_id: UUID) -> PayrollCalculation:
        calc = await self.get(calculation_id)
        updated = self.state_machine.submit(calc, now=self.clock())
        return await self._apply(calc, updated)

    async def approve(self, calculation_id: UUID, approver_id: str) -> PayrollCalculation:
        calc = await self.get(calculation_id)
        updated = self.state_machine.approve(calc, approver_id, now=self.clock())
        return await self._apply(calc, updated)

    async def mark_paid(self, calculation_id: UUID) -> PayrollCalculation:
        calc = await self.get(calculation_id)
        updated = self.state_machine.mark_paid(calc, now=self.clock())
        return await self._apply(calc, updated)

    async def _apply(
        self, current: PayrollCalculation, updated: PayrollCalculation
    ) -> PayrollCalculation:
        """Persist a transition only if the stored status is still ``current.status``."""
        applied = await self.repository.update_status(
            current.id,
            current.status,
            updated.status,
            updated_at=updated.updated_at,
            approver_id=updated.approved_by if updated.status == CalculationStatus.APPROVED else None,
            approved_at=updated.approved_at if updated.status == CalculationStatus.APPROVED else None,
        )
        if not applied:
            logger.warning(
                "Lost status update race on calculation %s (%s -> %s)",
                current.id,
                current.status.value,
                updated.status.value,
            )
            raise InvalidStateTransitionError(
                current.status.value,
                updated.status.value,
                "calculation was modified concurrently",
            )

        logger.info(
            "Calculation %s moved %s -> %s",
            current.id,
            current.status.value,
            updated.status.value,
        )
        return updated
