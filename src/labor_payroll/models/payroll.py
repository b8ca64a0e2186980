"""Payroll calculation model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.types import HOURS_DIGITS, MONEY_DIGITS, RATE_DIGITS
from labor_payroll.models.base import Base

HOURS = Numeric(HOURS_DIGITS + 2, 2)
RATE = Numeric(RATE_DIGITS + 6, 6)
MONEY = Numeric(MONEY_DIGITS + 2, 2)


class PayrollCalculationRecord(Base):
    """Persisted payroll calculation.

    Only status, approved_by, approved_at and updated_at are ever updated;
    the repository writes them with a status-guarded UPDATE.
    """

    __tablename__ = "payroll_calculation"

    calculation_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    regular_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False)
    double_time_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False)
    holiday_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False)
    vacation_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False)
    sick_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False)

    regular_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    overtime_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    double_time_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    holiday_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)

    gross_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    federal_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    state_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    social_security: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    medicare: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'pending_approval', 'approved', 'paid')",
            name="payroll_calculation_status_check",
        ),
        CheckConstraint("period_end >= period_start", name="payroll_calculation_dates_check"),
        CheckConstraint("other_deductions >= 0", name="payroll_calculation_other_check"),
        Index("ix_payroll_calculation_status", "status"),
        Index("ix_payroll_calculation_employee", "employee_id", "period_end"),
    )

    @classmethod
    def from_domain(cls, calc: PayrollCalculation) -> PayrollCalculationRecord:
        return cls(
            calculation_id=calc.id or uuid4(),
            employee_id=calc.employee_id,
            period_start=calc.period_start,
            period_end=calc.period_end,
            regular_hours=calc.regular_hours,
            overtime_hours=calc.overtime_hours,
            double_time_hours=calc.double_time_hours,
            holiday_hours=calc.holiday_hours,
            vacation_hours=calc.vacation_hours,
            sick_hours=calc.sick_hours,
            regular_rate=calc.regular_rate,
            overtime_rate=calc.overtime_rate,
            double_time_rate=calc.double_time_rate,
            holiday_rate=calc.holiday_rate,
            gross_pay=calc.gross_pay,
            federal_tax=calc.federal_tax,
            state_tax=calc.state_tax,
            social_security=calc.social_security,
            medicare=calc.medicare,
            other_deductions=calc.other_deductions,
            net_pay=calc.net_pay,
            status=calc.status.value,
            approved_by=calc.approved_by,
            approved_at=calc.approved_at,
            created_at=calc.created_at,
            updated_at=calc.updated_at or calc.created_at,
        )

    def to_domain(self) -> PayrollCalculation:
        """Rebuild the domain record. Invariants are re-checked on the way out."""
        return PayrollCalculation(
            id=self.calculation_id,
            employee_id=self.employee_id,
            period_start=self.period_start,
            period_end=self.period_end,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            double_time_hours=self.double_time_hours,
            holiday_hours=self.holiday_hours,
            vacation_hours=self.vacation_hours,
            sick_hours=self.sick_hours,
            regular_rate=self.regular_rate,
            overtime_rate=self.overtime_rate,
            double_time_rate=self.double_time_rate,
            holiday_rate=self.holiday_rate,
            gross_pay=self.gross_pay,
            federal_tax=self.federal_tax,
            state_tax=self.state_tax,
            social_security=self.social_security,
            medicare=self.medicare,
            other_deductions=self.other_deductions,
            net_pay=self.net_pay,
            status=self.status,
            approved_by=self.approved_by,
            approved_at=self.approved_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
