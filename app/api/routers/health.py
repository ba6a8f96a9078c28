"""
Health check endpoints for monitoring and orchestration (K8s, Docker, etc.)

Provides multiple health check endpoints:
- /health: Basic liveness check (always returns 200)
- /health/db: Database connectivity check
- /health/ready: Readiness check (all dependencies healthy)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.api.dependencies import get_locks, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "trailer-bookings-api"


@router.get("/health")
async def health_check():
    """
    Basic liveness probe.

    Returns 200 OK if the application is running.
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(session: AsyncSession = Depends(get_db_session)):
    """
    Database connectivity health check.

    Returns 503 Service Unavailable if database is down.
    """
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()

        return {"status": "healthy", "component": "database"}
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "component": "database",
                "error": "Database connection failed",
            },
        )


@router.get("/health/ready")
async def health_check_ready(session: AsyncSession = Depends(get_db_session)):
    """
    Readiness probe.

    Checks database connectivity and reports the payment gateway circuit.
    An open circuit is reported but does not make the service unready:
    bookings and webhooks still work while payment creation degrades.
    """
    health_status = {
        "status": "ready",
        "checks": {},
    }

    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        logger.error("Readiness check: Database unhealthy", exc_info=e)
        health_status["status"] = "not_ready"
        health_status["checks"]["database"] = "unhealthy"

        return JSONResponse(
            status_code=503,
            content=health_status,
        )

    breaker = getattr(get_payment_gateway(), "breaker", None)
    health_status["checks"]["payment_gateway"] = breaker.current_state if breaker else "mock"
    health_status["checks"]["active_locks"] = len(get_locks().active_keys())

    return health_status


@router.get("/health/live")
async def health_check_live():
    """Alias for /health for Kubernetes liveness probe."""
    return {"status": "ok", "service": SERVICE_NAME}
