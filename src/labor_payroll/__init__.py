"""Payroll calculation and approval engine for hourly construction labor."""

__version__ = "1.0.0"
