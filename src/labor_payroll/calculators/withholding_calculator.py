"""Flat-percentage withholding and net pay."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from labor_payroll.calculators.types import MONEY_LIMIT, Withholdings, round_cents, to_decimal
from labor_payroll.errors import InvalidInputError

FEDERAL_TAX_RATE = Decimal("0.12")
STATE_TAX_RATE = Decimal("0.05")
SOCIAL_SECURITY_RATE = Decimal("0.062")
MEDICARE_RATE = Decimal("0.0145")


class WithholdingCalculator:
    """Calculates statutory deductions as fixed percentages of gross pay.

    This is a simplified approximation, not a tax engine: no brackets, wage
    bases or jurisdictions. Each line is rounded to cents on its own, the
    way a pay stub itemizes it, and net pay is gross minus the rounded lines.
    Net pay is not clamped; a large ``other_deductions`` can make it negative.
    """

    def validate_other_deductions(self, value: Any) -> Decimal:
        """Validate caller-supplied other deductions and round to cents."""
        amount = to_decimal("other_deductions", value, MONEY_LIMIT)
        if amount < 0:
            raise InvalidInputError("other_deductions", value, "must not be negative")
        amount = round_cents(amount)
        if amount >= MONEY_LIMIT:
            raise InvalidInputError(
                "other_deductions", value, f"magnitude must be less than {MONEY_LIMIT}"
            )
        return amount

    def calculate(self, gross_pay: Decimal, other_deductions: Any = Decimal("0")) -> Withholdings:
        other = self.validate_other_deductions(other_deductions)

        federal = self._calculate_flat_tax(gross_pay, FEDERAL_TAX_RATE)
        state = self._calculate_flat_tax(gross_pay, STATE_TAX_RATE)
        social_security = self._calculate_flat_tax(gross_pay, SOCIAL_SECURITY_RATE)
        medicare = self._calculate_flat_tax(gross_pay, MEDICARE_RATE)

        net = round_cents(gross_pay - federal - state - social_security - medicare - other)

        return Withholdings(
            federal_tax=federal,
            state_tax=state,
            social_security=social_security,
            medicare=medicare,
            other_deductions=other,
            net_pay=net,
        )

    def _calculate_flat_tax(self, wages: Decimal, rate: Decimal) -> Decimal:
        """Calculate a flat-rate line, rounded half-up to cents."""
        if wages <= 0:
            return Decimal("0.00")
        return round_cents(wages * rate)
