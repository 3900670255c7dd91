"""
Health endpoints — public, unauthenticated.

- ``/health``       all checks
- ``/health/ready`` checks needed to serve traffic (database)
- ``/health/live``  process only, never touches a dependency
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.schemas.health import HealthCheckEntry, HealthResponse

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


async def _check_database(db: AsyncSession) -> HealthCheckEntry:
    started = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
        status, description = "Healthy", "Database connection is healthy"
    except (SQLAlchemyError, OSError) as e:
        logger.error("Health check DB failure: %s", e)
        status, description = "Unhealthy", "Database connection failed"
    return HealthCheckEntry(
        name="database",
        status=status,
        description=description,
        duration=round((time.perf_counter() - started) * 1000, 2),
    )


def _report(checks: list[HealthCheckEntry], started: float) -> JSONResponse:
    healthy = all(c.status == "Healthy" for c in checks)
    body = HealthResponse(
        status="Healthy" if healthy else "Unhealthy",
        total_duration=round((time.perf_counter() - started) * 1000, 2),
        checks=checks,
    )
    return JSONResponse(
        status_code=200 if healthy else 503,
        content=body.model_dump(mode="json", by_alias=True),
    )


@router.get("", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def health(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    started = time.perf_counter()
    return _report([await _check_database(db)], started)


@router.get("/ready", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def ready(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    started = time.perf_counter()
    return _report([await _check_database(db)], started)


@router.get("/live", response_model=HealthResponse)
async def live() -> JSONResponse:
    return _report([], time.perf_counter())
