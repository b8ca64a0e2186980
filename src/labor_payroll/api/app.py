"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labor_payroll import __version__
from labor_payroll.api.routes import calculations_router, health_router
from labor_payroll.database import create_schema, dispose_db, init_db
from labor_payroll.errors import (
    InvalidInputError,
    InvalidPeriodError,
    InvalidStateTransitionError,
    InvariantViolationError,
    NotFoundError,
    PayrollError,
    PersistenceError,
    UnsupportedPayTypeError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
ERROR_STATUS: list[tuple[type[PayrollError], int]] = [
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InvalidPeriodError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnsupportedPayTypeError, 422),
    (InvalidStateTransitionError, status.HTTP_409_CONFLICT),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (InvariantViolationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: PayrollError) -> int:
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    engine, _ = init_db()
    await create_schema(engine)
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Labor Payroll API",
        description="Payroll calculation and approval for hourly labor",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollError)
    async def payroll_error_handler(request: Request, exc: PayrollError) -> JSONResponse:
        """Map engine error kinds to HTTP responses."""
        code = status_for(exc)
        if code >= 500:
            logger.error("Payroll engine failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=code,
            content={"detail": str(exc), "code": exc.code, "context": exc.context()},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request bodies as invalid input."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Request validation failed",
                "code": InvalidInputError.code,
                "context": {"errors": [_error_summary(e) for e in exc.errors()]},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(calculations_router, prefix="/api/v1")

    return app


def _error_summary(error: dict) -> dict[str, str]:
    return {
        "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
        "reason": str(error.get("msg", "")),
    }


# Default app instance for uvicorn
app = create_app()
