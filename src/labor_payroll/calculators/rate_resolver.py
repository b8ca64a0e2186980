"""Pay rate resolution from an employee's base rate."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from labor_payroll.calculators.types import (
    BASE_RATE_LIMIT,
    EmployeeRecord,
    PayType,
    RateSchedule,
    to_decimal,
)
from labor_payroll.errors import (
    EmployeeNotFoundError,
    InvalidInputError,
    UnsupportedPayTypeError,
)

OVERTIME_MULTIPLIER = Decimal("1.5")
DOUBLE_TIME_MULTIPLIER = Decimal("2.0")
HOLIDAY_MULTIPLIER = Decimal("2.0")


class RateResolver:
    """Derives the four category rates for an hourly employee.

    Rate derivation:
    - regular = base rate
    - overtime = base rate x 1.5
    - double time = base rate x 2.0
    - holiday = base rate x 2.0

    Vacation and sick hours are paid at the regular rate. Multipliers are
    fixed for every employee and are not configurable per call.
    """

    def resolve(
        self,
        employee: EmployeeRecord | None,
        employee_id: UUID | None = None,
    ) -> RateSchedule:
        """Resolve the rate schedule for an employee.

        Args:
            employee: The employee from the registry, or None if the lookup missed
            employee_id: The requested id, used only for the not-found message

        Raises:
            EmployeeNotFoundError: No employee was resolved
            UnsupportedPayTypeError: Employee is not paid hourly
            InvalidInputError: Base rate is not a positive number below BASE_RATE_LIMIT
        """
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        pay_type = getattr(employee.pay_type, "value", employee.pay_type)
        if pay_type != PayType.HOURLY.value:
            raise UnsupportedPayTypeError(employee.employee_id, pay_type)

        base_rate = to_decimal("base_rate", employee.base_rate, BASE_RATE_LIMIT)
        if base_rate <= 0:
            raise InvalidInputError("base_rate", employee.base_rate, "base rate must be positive")

        return RateSchedule(
            regular_rate=base_rate,
            overtime_rate=base_rate * OVERTIME_MULTIPLIER,
            double_time_rate=base_rate * DOUBLE_TIME_MULTIPLIER,
            holiday_rate=base_rate * HOLIDAY_MULTIPLIER,
        )
