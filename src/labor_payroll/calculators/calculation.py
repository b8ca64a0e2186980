"""The payroll calculation record and its invariants."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from labor_payroll.calculators.gross_pay import GrossPayCalculator
from labor_payroll.calculators.rate_resolver import (
    DOUBLE_TIME_MULTIPLIER,
    HOLIDAY_MULTIPLIER,
    OVERTIME_MULTIPLIER,
)
from labor_payroll.calculators.types import (
    CalculationStatus,
    HoursEntry,
    RateSchedule,
    Withholdings,
)
from labor_payroll.calculators.withholding_calculator import WithholdingCalculator
from labor_payroll.errors import InvalidStateTransitionError, InvariantViolationError

APPROVED_STATUSES = frozenset({CalculationStatus.APPROVED, CalculationStatus.PAID})

# Fields that may change after a record is created; everything else is a snapshot.
MUTABLE_FIELDS = frozenset({"status", "approved_by", "approved_at", "updated_at", "id"})


@dataclass(frozen=True)
class PayrollCalculation:
    """One employee's pay for one period, from hours through net pay.

    Instances are frozen. Status changes go through ApprovalStateMachine,
    which returns a new instance through ``evolve``; every construction
    re-checks the full invariant set and raises InvariantViolationError on any
    breach. ``evolve`` also refuses any change to a paid record.
    """

    employee_id: UUID
    period_start: date
    period_end: date

    regular_hours: Decimal
    overtime_hours: Decimal
    double_time_hours: Decimal
    holiday_hours: Decimal
    vacation_hours: Decimal
    sick_hours: Decimal

    regular_rate: Decimal
    overtime_rate: Decimal
    double_time_rate: Decimal
    holiday_rate: Decimal

    gross_pay: Decimal
    federal_tax: Decimal
    state_tax: Decimal
    social_security: Decimal
    medicare: Decimal
    other_deductions: Decimal
    net_pay: Decimal

    status: CalculationStatus = CalculationStatus.DRAFT
    created_at: datetime | None = None
    updated_at: datetime | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    id: UUID | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, CalculationStatus):
            try:
                object.__setattr__(self, "status", CalculationStatus(self.status))
            except ValueError:
                raise InvariantViolationError([f"unknown status {self.status!r}"]) from None

        violations = check_invariants(self)
        if violations:
            raise InvariantViolationError(violations)

    @classmethod
    def assemble(
        cls,
        hours: HoursEntry,
        rates: RateSchedule,
        gross_pay: Decimal,
        withholdings: Withholdings,
        created_at: datetime | None = None,
    ) -> PayrollCalculation:
        """Build a new draft record from pipeline outputs."""
        return cls(
            employee_id=hours.employee_id,
            period_start=hours.period_start,
            period_end=hours.period_end,
            regular_hours=hours.regular_hours,
            overtime_hours=hours.overtime_hours,
            double_time_hours=hours.double_time_hours,
            holiday_hours=hours.holiday_hours,
            vacation_hours=hours.vacation_hours,
            sick_hours=hours.sick_hours,
            regular_rate=rates.regular_rate,
            overtime_rate=rates.overtime_rate,
            double_time_rate=rates.double_time_rate,
            holiday_rate=rates.holiday_rate,
            gross_pay=gross_pay,
            federal_tax=withholdings.federal_tax,
            state_tax=withholdings.state_tax,
            social_security=withholdings.social_security,
            medicare=withholdings.medicare,
            other_deductions=withholdings.other_deductions,
            net_pay=withholdings.net_pay,
            status=CalculationStatus.DRAFT,
            created_at=created_at,
            updated_at=created_at,
        )

    @property
    def hours(self) -> HoursEntry:
        return HoursEntry(
            employee_id=self.employee_id,
            period_start=self.period_start,
            period_end=self.period_end,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            double_time_hours=self.double_time_hours,
            holiday_hours=self.holiday_hours,
            vacation_hours=self.vacation_hours,
            sick_hours=self.sick_hours,
        )

    @property
    def rates(self) -> RateSchedule:
        return RateSchedule(
            regular_rate=self.regular_rate,
            overtime_rate=self.overtime_rate,
            double_time_rate=self.double_time_rate,
            holiday_rate=self.holiday_rate,
        )

    @property
    def total_hours(self) -> Decimal:
        return self.hours.total_hours

    @property
    def total_taxes(self) -> Decimal:
        return self.federal_tax + self.state_tax + self.social_security + self.medicare

    @property
    def total_deductions(self) -> Decimal:
        return self.total_taxes + self.other_deductions

    @property
    def is_immutable(self) -> bool:
        return self.status == CalculationStatus.PAID

    def snapshot_fields(self) -> dict[str, object]:
        """Fields frozen at creation; used to prove a transition changed nothing else."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in MUTABLE_FIELDS}

    def evolve(self, **changes: object) -> PayrollCalculation:
        """Return a copy with lifecycle fields changed.

        Only MUTABLE_FIELDS may change, and a paid record refuses every change.
        """
        fixed = sorted(set(changes) - MUTABLE_FIELDS)
        if fixed:
            raise InvariantViolationError([f"{name} cannot change after creation" for name in fixed])
        if self.is_immutable:
            target = changes.get("status", self.status)
            raise InvalidStateTransitionError(
                self.status.value,
                getattr(target, "value", str(target)),
                "paid calculations are immutable",
            )
        return replace(self, **changes)


def check_invariants(calc: PayrollCalculation) -> list[str]:
    """Recompute every derived field and return a description of each mismatch."""
    violations: list[str] = []

    if calc.period_end < calc.period_start:
        violations.append("period_end precedes period_start")

    hours = calc.hours
    for name in (
        "regular_hours",
        "overtime_hours",
        "double_time_hours",
        "holiday_hours",
        "vacation_hours",
        "sick_hours",
    ):
        if getattr(hours, name) < 0:
            violations.append(f"{name} is negative")

    rates = calc.rates
    if rates.regular_rate <= 0:
        violations.append("regular_rate is not positive")
    elif (
        rates.overtime_rate != rates.regular_rate * OVERTIME_MULTIPLIER
        or rates.double_time_rate != rates.regular_rate * DOUBLE_TIME_MULTIPLIER
        or rates.holiday_rate != rates.regular_rate * HOLIDAY_MULTIPLIER
    ):
        violations.append("premium rates do not match the regular rate multipliers")

    expected_gross = GrossPayCalculator().calculate(hours, rates)
    if calc.gross_pay != expected_gross:
        violations.append(f"gross_pay {calc.gross_pay} != {expected_gross}")

    if calc.other_deductions < 0:
        violations.append("other_deductions is negative")
    else:
        expected = WithholdingCalculator().calculate(calc.gross_pay, calc.other_deductions)
        for name in (
            "federal_tax",
            "state_tax",
            "social_security",
            "medicare",
            "other_deductions",
            "net_pay",
        ):
            actual, wanted = getattr(calc, name), getattr(expected, name)
            if actual != wanted:
                violations.append(f"{name} {actual} != {wanted}")

    approved = calc.status in APPROVED_STATUSES
    if approved and (not calc.approved_by or calc.approved_at is None):
        violations.append(f"status '{calc.status.value}' requires approved_by and approved_at")
    if not approved and (calc.approved_by is not None or calc.approved_at is not None):
        violations.append(f"status '{calc.status.value}' must not carry approval fields")

    return violations
