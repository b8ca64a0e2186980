"""Employee registry model."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from labor_payroll.calculators.types import BASE_RATE_DIGITS, EmployeeRecord
from labor_payroll.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee pay profile. Owned by the workforce module; read-only here."""

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    base_rate: Mapped[Decimal] = mapped_column(Numeric(BASE_RATE_DIGITS + 4, 4), nullable=False)
    pay_type: Mapped[str] = mapped_column(String, nullable=False, default="hourly")
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint("pay_type IN ('hourly', 'salary')", name="employee_pay_type_check"),
        CheckConstraint(
            "status IN ('active', 'inactive', 'terminated')",
            name="employee_status_check",
        ),
    )

    def to_record(self) -> EmployeeRecord:
        return EmployeeRecord(
            employee_id=self.employee_id,
            base_rate=self.base_rate,
            pay_type=self.pay_type,
            status=self.status,
            name=self.name,
        )
