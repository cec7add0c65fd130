"""
Health endpoints.

/health is a liveness check with no dependencies. /health/ready pings
the notification store and answers 503 when it cannot be reached within
notifications.yaml health_ready_timeout_seconds.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from depot.backend.core.logging import get_logger
from depot.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    """Run SELECT 1 against the store and report status with latency or error."""
    from depot.backend.core.config import get_app_config
    from depot.backend.core.database import get_session_factory

    if not get_app_config().database.name:
        return {"status": "not_configured"}

    started = utc_now()
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Store ping failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "latency_ms": int((utc_now() - started).total_seconds() * 1000),
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    from depot.backend.core.config import get_app_config

    timeout = get_app_config().notifications.health_ready_timeout_seconds
    try:
        async with asyncio.timeout(timeout):
            database = await check_database()
    except TimeoutError:
        database = {"status": "unhealthy", "error": f"timed out after {timeout}s"}

    body = {
        "status": "unhealthy" if database["status"] == "unhealthy" else "healthy",
        "checks": {"database": database},
        "timestamp": utc_now().isoformat(),
    }
    if body["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=body)
    return body
