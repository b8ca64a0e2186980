"""Validation and normalization of labor-hours submissions."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from labor_payroll.calculators.types import HOURS_LIMIT, HoursEntry, round_cents, to_decimal
from labor_payroll.errors import InvalidInputError, InvalidPeriodError

HOUR_FIELDS = (
    "regular_hours",
    "overtime_hours",
    "double_time_hours",
    "holiday_hours",
    "vacation_hours",
    "sick_hours",
)


def parse_employee_id(value: Any) -> UUID:
    """Coerce an employee identifier to UUID."""
    if value is None:
        raise InvalidInputError("employee_id", value, "value is required")
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidInputError("employee_id", value, "must be a UUID") from None


def parse_date(field: str, value: Any) -> date:
    """Coerce a date, datetime or ISO string to a date."""
    if value is None:
        raise InvalidInputError(field, value, "value is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInputError(field, value, "must be an ISO date") from None
    raise InvalidInputError(field, value, "must be a date")


def parse_hours(field: str, value: Any) -> Decimal:
    """Validate a single hours value and round it to hundredths."""
    hours = to_decimal(field, value, HOURS_LIMIT)
    if hours < 0:
        raise InvalidInputError(field, value, "hours must not be negative")
    hours = round_cents(hours)
    if hours >= HOURS_LIMIT:
        raise InvalidInputError(field, value, f"magnitude must be less than {HOURS_LIMIT}")
    return hours


class HoursClassifier:
    """Turns a raw hours submission into a normalized HoursEntry.

    Six categories are fixed: regular, overtime, double time, holiday,
    vacation and sick. Every category is required and must be a
    non-negative number. Quarter-hour or tenth-hour granularity is up to
    the caller; the engine only tracks hundredths.
    """

    def classify(
        self,
        employee_id: Any,
        period_start: Any,
        period_end: Any,
        **hours: Any,
    ) -> HoursEntry:
        """Validate and normalize a submission.

        Raises:
            InvalidInputError: missing, non-numeric or negative hours, or an
                unknown hours category
            InvalidPeriodError: period_end before period_start
        """
        unknown = sorted(set(hours) - set(HOUR_FIELDS))
        if unknown:
            raise InvalidInputError(unknown[0], hours[unknown[0]], "unknown hours category")

        normalized = {field: parse_hours(field, hours.get(field)) for field in HOUR_FIELDS}

        start = parse_date("period_start", period_start)
        end = parse_date("period_end", period_end)
        if end < start:
            raise InvalidPeriodError(start, end)

        return HoursEntry(
            employee_id=parse_employee_id(employee_id),
            period_start=start,
            period_end=end,
            **normalized,
        )
