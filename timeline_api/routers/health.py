"""
Health check router.

Liveness and readiness endpoints for load balancers and orchestrators.
"""
import asyncio
import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text

from timeline_api.config import get_settings
from timeline_api.database import engine
from timeline_api.utils.prometheus_metrics import REGISTRY, Gauge, ready

logger = logging.getLogger("timeline_api.health")
router = APIRouter(prefix="/health", tags=["Health"])

settings = get_settings()

DB_CHECK_TIMEOUT = 1.0

health_check_status = Gauge(
    "timeline_api_health_check_status",
    "Health check status (1=healthy, 0=unhealthy)",
    ["check_type"],
    registry=REGISTRY,
)


def _is_ready() -> bool:
    return ready._value.get() == 1


async def _check_db() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def _require_db(check_type: str) -> None:
    """Raise 503 if the database does not answer within the timeout."""
    try:
        await asyncio.wait_for(_check_db(), timeout=DB_CHECK_TIMEOUT)
    except asyncio.TimeoutError:
        logger.warning("DB health check timeout", extra={"event": "health", "check_type": check_type})
        health_check_status.labels(check_type=check_type).set(0)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection timeout",
        )
    except Exception as e:
        logger.warning(
            "DB health check failed",
            extra={"event": "health", "check_type": check_type, "error": str(e)},
        )
        health_check_status.labels(check_type=check_type).set(0)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not ready",
        )


@router.get(
    "",
    summary="Health check (fast)",
)
async def health_check() -> Dict[str, Any]:
    """
    Fast health check for load balancers.

    Fails while the application is shutting down or the database is unreachable.
    """
    start_time = time.perf_counter()

    if not _is_ready():
        health_check_status.labels(check_type="fast").set(0)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application is shutting down",
        )

    await _require_db("fast")

    health_check_status.labels(check_type="fast").set(1)
    return {
        "status": "healthy",
        "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
        "instance": settings.instance_ip or "unknown",
    }


@router.get(
    "/liveness",
    summary="Liveness probe",
)
async def liveness_probe() -> Dict[str, str]:
    """The process is up and serving requests."""
    return {"status": "alive"}


@router.get(
    "/readiness",
    summary="Readiness probe",
)
async def readiness_probe() -> Dict[str, str]:
    """
    The application can take traffic: started, not draining, database reachable.
    """
    if not _is_ready():
        health_check_status.labels(check_type="readiness").set(0)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application is not ready",
        )

    await _require_db("readiness")

    health_check_status.labels(check_type="readiness").set(1)
    return {"status": "ready"}
