"""SQLAlchemy ORM models."""

from labor_payroll.models.base import Base, TimestampMixin
from labor_payroll.models.employee import Employee
from labor_payroll.models.payroll import PayrollCalculationRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "PayrollCalculationRecord",
]
