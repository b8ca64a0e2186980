"""Payroll engine services."""

from labor_payroll.services.payroll_service import PayrollService
from labor_payroll.services.repository import (
    CalculationRepository,
    EmployeeRegistry,
    SqlAlchemyCalculationRepository,
    SqlAlchemyEmployeeRegistry,
)
from labor_payroll.services.state_machine import ApprovalStateMachine

__all__ = [
    "ApprovalStateMachine",
    "CalculationRepository",
    "EmployeeRegistry",
    "PayrollService",
    "SqlAlchemyCalculationRepository",
    "SqlAlchemyEmployeeRegistry",
]
