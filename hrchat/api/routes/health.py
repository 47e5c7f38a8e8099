"""
Health Check Routes

FastAPI endpoints for service health and readiness checks.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from hrchat.config import get_settings
from hrchat.connectors.base import ConnectorError
from hrchat.models.api import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    """
    Basic liveness check.

    Always succeeds while the process is serving requests, whether or not
    the database is reachable.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok",
        message=f"{settings.app_name} API is running",
        version=settings.version,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness() -> JSONResponse:
    """
    Readiness check for service dependencies.

    Checks:
    - Database connection answers a trivial query
    - Pipeline is initialized

    Returns:
        200 OK if all checks pass
        503 Service Unavailable if any check fails
    """
    from hrchat.api.main import app_state

    checks: dict[str, bool] = {}

    connector = app_state["connector"]
    if connector is None:
        checks["database"] = False
        logger.warning("Database check: FAILED (connector not initialized)")
    else:
        try:
            await connector.execute("SELECT 1")
            checks["database"] = True
        except ConnectorError as e:
            checks["database"] = False
            logger.warning(f"Database check: FAILED ({e})")

    checks["pipeline"] = app_state["pipeline"] is not None
    if not checks["pipeline"]:
        logger.warning("Pipeline check: FAILED (not initialized)")

    all_ready = all(checks.values())
    response_data = ReadinessResponse(
        status="ready" if all_ready else "not_ready",
        version=get_settings().version,
        timestamp=datetime.now(UTC).isoformat(),
        checks=checks,
    )

    status_code = status.HTTP_200_OK if all_ready else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=response_data.model_dump())
