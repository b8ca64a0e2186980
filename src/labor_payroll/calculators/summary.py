"""Aggregate figures over a set of payroll calculations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from labor_payroll.calculators.calculation import APPROVED_STATUSES, PayrollCalculation
from labor_payroll.calculators.types import CalculationStatus


@dataclass
class PayrollSummary:
    """Totals and status counts for a batch of calculations."""

    total_employees: int = 0
    total_gross_pay: Decimal = Decimal("0.00")
    total_net_pay: Decimal = Decimal("0.00")
    total_taxes: Decimal = Decimal("0.00")
    status_counts: dict[str, int] = field(
        default_factory=lambda: {s.value: 0 for s in CalculationStatus}
    )

    @property
    def pending_count(self) -> int:
        """Records not yet approved (draft or awaiting approval)."""
        return (
            self.status_counts[CalculationStatus.DRAFT.value]
            + self.status_counts[CalculationStatus.PENDING_APPROVAL.value]
        )


def summarize(
    calculations: Iterable[PayrollCalculation],
    disbursed_only: bool = False,
) -> PayrollSummary:
    """Summarize calculations.

    Status counts always cover every record. With ``disbursed_only`` the
    money totals only include approved and paid records.
    """
    summary = PayrollSummary()
    employees = set()

    for calc in calculations:
        summary.status_counts[calc.status.value] += 1
        employees.add(calc.employee_id)

        if disbursed_only and calc.status not in APPROVED_STATUSES:
            continue
        summary.total_gross_pay += calc.gross_pay
        summary.total_net_pay += calc.net_pay
        summary.total_taxes += calc.total_taxes

    summary.total_employees = len(employees)
    return summary
