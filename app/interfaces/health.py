"""
Health check router.

Liveness and readiness check. Reports the application version and whether the
database answers a trivial query.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.interfaces.exchange.dependencies import get_session_factory
from app.interfaces.exchange.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns 'ok' when the database is reachable, 'degraded' otherwise.",
)
def health_check(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> HealthResponse:
    try:
        with session_factory() as session:
            session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", type(exc).__name__)
        return HealthResponse(status="degraded", version=settings.version, database="down")
    return HealthResponse(status="ok", version=settings.version, database="up")
