"""Health check response bodies."""

from __future__ import annotations

from app.schemas.common import CamelModel


class HealthCheckEntry(CamelModel):
    name: str
    status: str
    description: str | None = None
    duration: float


class HealthResponse(CamelModel):
    status: str
    total_duration: float
    checks: list[HealthCheckEntry]
