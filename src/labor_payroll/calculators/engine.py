"""Payroll calculation engine - pure pipeline orchestrator."""

from __future__ import annotations

from datetime import datetime, timezone

from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.gross_pay import GrossPayCalculator
from labor_payroll.calculators.hours_classifier import HoursClassifier
from labor_payroll.calculators.rate_resolver import RateResolver
from labor_payroll.calculators.types import (
    CalculationRequest,
    EmployeeRecord,
    PreparedRequest,
)
from labor_payroll.calculators.withholding_calculator import WithholdingCalculator


class PayrollEngine:
    """Main payroll calculation engine.

    Calculation pipeline (stable order):
    1) Classify and validate hours
    2) Validate other deductions
    3) Resolve category rates from the employee's base rate
    4) Compute gross pay
    5) Compute withholdings and net pay
    6) Assemble a draft PayrollCalculation (full invariant check)

    Steps 1-2 run in ``prepare`` so bad requests are rejected before any
    employee lookup. The engine holds no mutable state and does no I/O.
    """

    def __init__(self) -> None:
        self.classifier = HoursClassifier()
        self.rate_resolver = RateResolver()
        self.gross_calculator = GrossPayCalculator()
        self.withholding_calculator = WithholdingCalculator()

    def prepare(self, request: CalculationRequest) -> PreparedRequest:
        """Validate a raw request. Raises InvalidInputError or InvalidPeriodError."""
        hours = self.classifier.classify(
            request.employee_id,
            request.period_start,
            request.period_end,
            regular_hours=request.regular_hours,
            overtime_hours=request.overtime_hours,
            double_time_hours=request.double_time_hours,
            holiday_hours=request.holiday_hours,
            vacation_hours=request.vacation_hours,
            sick_hours=request.sick_hours,
        )
        other = self.withholding_calculator.validate_other_deductions(request.other_deductions)
        return PreparedRequest(hours=hours, other_deductions=other)

    def calculate(
        self,
        prepared: PreparedRequest,
        employee: EmployeeRecord | None,
        now: datetime | None = None,
    ) -> PayrollCalculation:
        """Run rate resolution through assembly for a validated request."""
        hours = prepared.hours
        rates = self.rate_resolver.resolve(employee, employee_id=hours.employee_id)
        gross = self.gross_calculator.calculate(hours, rates)
        withholdings = self.withholding_calculator.calculate(gross, prepared.other_deductions)

        return PayrollCalculation.assemble(
            hours,
            rates,
            gross,
            withholdings,
            created_at=now or datetime.now(timezone.utc),
        )

    def run(
        self,
        request: CalculationRequest,
        employee: EmployeeRecord | None,
        now: datetime | None = None,
    ) -> PayrollCalculation:
        """Validate and calculate in one call."""
        return self.calculate(self.prepare(request), employee, now=now)
