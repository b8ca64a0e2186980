"""Payroll calculation pipeline."""

from labor_payroll.calculators.calculation import PayrollCalculation
from labor_payroll.calculators.engine import PayrollEngine
from labor_payroll.calculators.gross_pay import GrossPayCalculator
from labor_payroll.calculators.hours_classifier import HoursClassifier
from labor_payroll.calculators.periods import current_pay_period
from labor_payroll.calculators.rate_resolver import RateResolver
from labor_payroll.calculators.summary import PayrollSummary, summarize
from labor_payroll.calculators.withholding_calculator import WithholdingCalculator

__all__ = [
    "PayrollCalculation",
    "PayrollEngine",
    "GrossPayCalculator",
    "HoursClassifier",
    "PayrollSummary",
    "RateResolver",
    "WithholdingCalculator",
    "current_pay_period",
    "summarize",
]
