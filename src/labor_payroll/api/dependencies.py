"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from labor_payroll.config import get_settings
from labor_payroll.database import init_db
from labor_payroll.services.payroll_service import PayrollService
from labor_payroll.services.repository import (
    SqlAlchemyCalculationRepository,
    SqlAlchemyEmployeeRegistry,
)
from labor_payroll.services.state_machine import ApprovalStateMachine


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency. Commits when the request succeeds."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_payroll_service(db: DbSession) -> PayrollService:
    """Build a payroll service bound to the request's session."""
    return PayrollService(
        repository=SqlAlchemyCalculationRepository(db),
        employees=SqlAlchemyEmployeeRegistry(db),
        state_machine=ApprovalStateMachine(
            require_submission=get_settings().require_submission
        ),
    )


# Type aliases for cleaner dependency injection
PayrollServiceDep = Annotated[PayrollService, Depends(get_payroll_service)]
