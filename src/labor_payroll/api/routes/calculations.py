"""Payroll calculation API endpoints.

Error kinds raised by the service are translated to HTTP responses by the
handlers registered in ``labor_payroll.api.app``.
"""

from dataclasses import asdict
from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from labor_payroll.api.dependencies import PayrollServiceDep
from labor_payroll.api.schemas import (
    ApprovalRequest,
    CalculationCreate,
    CalculationListResponse,
    CalculationResponse,
    ErrorResponse,
    PayPeriodResponse,
    SummaryResponse,
)
from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.periods import current_pay_period
from labor_payroll.calculators.types import CalculationRequest, CalculationStatus

router = APIRouter(prefix="/payroll-calculations", tags=["payroll-calculations"])


def _to_response(calc: PayrollCalculation) -> CalculationResponse:
    data = asdict(calc)
    data["status"] = calc.status.value
    data["total_hours"] = calc.total_hours
    data["total_deductions"] = calc.total_deductions
    return CalculationResponse.model_validate(data)


# ============================================================================
# Calculation
# ============================================================================


@router.post(
    "",
    response_model=CalculationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_calculation(
    service: PayrollServiceDep,
    payload: CalculationCreate,
) -> CalculationResponse:
    """Calculate pay for one employee and period. The record starts in draft."""
    calc = await service.calculate(CalculationRequest(**payload.model_dump()))
    return _to_response(calc)


@router.get("", response_model=CalculationListResponse)
async def list_calculations(
    service: PayrollServiceDep,
    status_filter: Annotated[CalculationStatus | None, Query(alias="status")] = None,
) -> CalculationListResponse:
    """List calculations, newest pay period first, optionally by status."""
    calcs = await service.list_calculations(status_filter)
    return CalculationListResponse(items=[_to_response(c) for c in calcs], total=len(calcs))


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    service: PayrollServiceDep,
    disbursed_only: bool = False,
) -> SummaryResponse:
    """Totals and status counts across all calculations."""
    summary = await service.summary(disbursed_only=disbursed_only)
    return SummaryResponse(
        total_employees=summary.total_employees,
        total_gross_pay=summary.total_gross_pay,
        total_net_pay=summary.total_net_pay,
        total_taxes=summary.total_taxes,
        status_counts=summary.status_counts,
        pending_count=summary.pending_count,
    )


@router.get("/current-period", response_model=PayPeriodResponse)
async def get_current_period(today: date | None = None) -> PayPeriodResponse:
    """The Sunday-to-Saturday week containing today (or ``today``)."""
    start, end = current_pay_period(today)
    return PayPeriodResponse(period_start=start, period_end=end)


@router.get(
    "/{calculation_id}",
    response_model=CalculationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_calculation(
    service: PayrollServiceDep,
    calculation_id: Annotated[UUID, Path()],
) -> CalculationResponse:
    """Get a specific calculation by ID."""
    return _to_response(await service.get(calculation_id))


# ============================================================================
# State Transitions
# ============================================================================


@router.post(
    "/{calculation_id}/submit",
    response_model=CalculationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def submit_calculation(
    service: PayrollServiceDep,
    calculation_id: Annotated[UUID, Path()],
) -> CalculationResponse:
    """Submit a draft calculation for approval."""
    return _to_response(await service.submit(calculation_id))


@router.post(
    "/{calculation_id}/approve",
    response_model=CalculationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_calculation(
    service: PayrollServiceDep,
    calculation_id: Annotated[UUID, Path()],
    payload: ApprovalRequest,
) -> CalculationResponse:
    """Approve a draft or pending calculation."""
    return _to_response(await service.approve(calculation_id, payload.approver_id))


@router.post(
    "/{calculation_id}/mark-paid",
    response_model=CalculationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_calculation_paid(
    service: PayrollServiceDep,
    calculation_id: Annotated[UUID, Path()],
) -> CalculationResponse:
    """Mark an approved calculation as paid. It cannot change afterwards."""
    return _to_response(await service.mark_paid(calculation_id))
