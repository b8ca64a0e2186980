"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Calculation schemas
# ============================================================================


class CalculationCreate(BaseModel):
    """Schema for a calculate request. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    employee_id: UUID
    period_start: date
    period_end: date
    regular_hours: Decimal
    overtime_hours: Decimal
    double_time_hours: Decimal
    holiday_hours: Decimal
    vacation_hours: Decimal
    sick_hours: Decimal
    other_deductions: Decimal = Decimal("0")


class CalculationResponse(BaseModel):
    """Schema for a payroll calculation."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    period_start: date
    period_end: date

    regular_hours: Decimal
    overtime_hours: Decimal
    double_time_hours: Decimal
    holiday_hours: Decimal
    vacation_hours: Decimal
    sick_hours: Decimal
    total_hours: Decimal

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
    total_deductions: Decimal
    net_pay: Decimal

    status: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class CalculationListResponse(BaseModel):
    """Schema for listing calculations."""

    items: list[CalculationResponse]
    total: int


class SummaryResponse(BaseModel):
    """Schema for payroll summary totals."""

    total_employees: int
    total_gross_pay: Decimal
    total_net_pay: Decimal
    total_taxes: Decimal
    status_counts: dict[str, int]
    pending_count: int


class PayPeriodResponse(BaseModel):
    """Schema for the current pay period."""

    period_start: date
    period_end: date


# ============================================================================
# Approval schemas
# ============================================================================


class ApprovalRequest(BaseModel):
    """Schema for approval request."""

    model_config = ConfigDict(extra="forbid")

    approver_id: str = Field(min_length=1)


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
