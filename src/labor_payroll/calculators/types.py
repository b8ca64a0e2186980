"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID

from labor_payroll.errors import InvalidInputError

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Integer digits the storage columns hold. Every value is checked against
# these before any arithmetic, so products stay far inside Decimal precision.
HOURS_DIGITS = 6
BASE_RATE_DIGITS = 8
RATE_DIGITS = 10
MONEY_DIGITS = 10

HOURS_LIMIT = Decimal(10) ** HOURS_DIGITS
BASE_RATE_LIMIT = Decimal(10) ** BASE_RATE_DIGITS
MONEY_LIMIT = Decimal(10) ** MONEY_DIGITS


def round_cents(value: Decimal) -> Decimal:
    """Round to two decimal places, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(field: str, value: Any, limit: Decimal | None = None) -> Decimal:
    """Coerce a raw numeric value to Decimal, rejecting missing and non-numeric input.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. With ``limit``, magnitudes at or above it are rejected.
    """
    if value is None:
        raise InvalidInputError(field, value, "value is required")
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "must be a number")

    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, int):
            result = Decimal(value)
        elif isinstance(value, (float, str)):
            result = Decimal(str(value).strip())
        else:
            raise InvalidInputError(field, value, "must be a number")
    except InvalidOperation:
        raise InvalidInputError(field, value, "must be a number") from None

    if not result.is_finite():
        raise InvalidInputError(field, value, "must be a finite number")
    if limit is not None and abs(result) >= limit:
        raise InvalidInputError(field, value, f"magnitude must be less than {limit}")
    return result


class PayType(str, Enum):
    """Employee compensation basis."""

    HOURLY = "hourly"
    SALARY = "salary"


class CalculationStatus(str, Enum):
    """Payroll calculation status values."""

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    PAID = "paid"


@dataclass(frozen=True)
class EmployeeRecord:
    """Read-only view of an employee as supplied by the registry."""

    employee_id: UUID
    base_rate: Decimal
    pay_type: str
    status: str = "active"
    name: str | None = None


@dataclass(frozen=True)
class HoursEntry:
    """Normalized hours for one employee and pay period, in hundredths of an hour."""

    employee_id: UUID
    period_start: date
    period_end: date
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    double_time_hours: Decimal = ZERO
    holiday_hours: Decimal = ZERO
    vacation_hours: Decimal = ZERO
    sick_hours: Decimal = ZERO

    @property
    def total_hours(self) -> Decimal:
        return (
            self.regular_hours
            + self.overtime_hours
            + self.double_time_hours
            + self.holiday_hours
            + self.vacation_hours
            + self.sick_hours
        )


@dataclass(frozen=True)
class RateSchedule:
    """Per-category hourly rates derived from a base rate."""

    regular_rate: Decimal
    overtime_rate: Decimal
    double_time_rate: Decimal
    holiday_rate: Decimal


@dataclass(frozen=True)
class Withholdings:
    """Itemized deductions and the resulting net pay."""

    federal_tax: Decimal
    state_tax: Decimal
    social_security: Decimal
    medicare: Decimal
    other_deductions: Decimal
    net_pay: Decimal

    @property
    def total_taxes(self) -> Decimal:
        return self.federal_tax + self.state_tax + self.social_security + self.medicare

    @property
    def total_deductions(self) -> Decimal:
        return self.total_taxes + self.other_deductions


@dataclass(frozen=True)
class CalculationRequest:
    """Raw calculate request as received at the boundary, before validation."""

    employee_id: Any
    period_start: Any
    period_end: Any
    regular_hours: Any = None
    overtime_hours: Any = None
    double_time_hours: Any = None
    holiday_hours: Any = None
    vacation_hours: Any = None
    sick_hours: Any = None
    other_deductions: Any = ZERO


@dataclass(frozen=True)
class PreparedRequest:
    """A calculate request whose inputs have passed validation."""

    hours: HoursEntry
    other_deductions: Decimal
