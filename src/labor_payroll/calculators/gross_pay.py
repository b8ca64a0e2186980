"""Gross pay from classified hours and resolved rates."""

from __future__ import annotations

from decimal import Decimal

from labor_payroll.calculators.types import MONEY_LIMIT, HoursEntry, RateSchedule, round_cents
from labor_payroll.errors import InvalidInputError


class GrossPayCalculator:
    """Combines hours and rates into gross pay.

    Hours and rates arrive validated and bounded, so every product stays well
    inside Decimal precision.
    The one failure left is a total too large to store as a money amount.
    """

    def earnings(self, hours: HoursEntry, rates: RateSchedule) -> dict[str, Decimal]:
        """Unrounded earnings per hours category, in a stable order."""
        return {
            "regular": hours.regular_hours * rates.regular_rate,
            "overtime": hours.overtime_hours * rates.overtime_rate,
            "double_time": hours.double_time_hours * rates.double_time_rate,
            "holiday": hours.holiday_hours * rates.holiday_rate,
            "vacation": hours.vacation_hours * rates.regular_rate,
            "sick": hours.sick_hours * rates.regular_rate,
        }

    def calculate(self, hours: HoursEntry, rates: RateSchedule) -> Decimal:
        """Sum the exact category earnings, then round once to cents."""
        # Decimal addition is exact here, so summation order cannot move the result.
        gross = round_cents(sum(self.earnings(hours, rates).values(), Decimal("0")))
        if gross >= MONEY_LIMIT:
            raise InvalidInputError(
                "gross_pay", gross, f"hours times rate must be less than {MONEY_LIMIT}"
            )
        return gross
