"""API routes."""

from labor_payroll.api.routes.calculations import router as calculations_router
from labor_payroll.api.routes.health import router as health_router

__all__ = ["calculations_router", "health_router"]
