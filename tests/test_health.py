"""Health endpoint tests."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.api.v1.deps import get_db
from app.main import app

API = "/api/v1"


@pytest.mark.asyncio
async def test_health_reports_database(async_client: AsyncClient):
    resp = await async_client.get(f"{API}/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Healthy"
    assert body["checks"][0]["name"] == "database"
    assert "totalDuration" in body


@pytest.mark.asyncio
async def test_ready_and_live(async_client: AsyncClient):
    assert (await async_client.get(f"{API}/health/ready")).status_code == 200
    live = await async_client.get(f"{API}/health/live")
    assert live.status_code == 200
    assert live.json()["checks"] == []


@pytest.mark.asyncio
async def test_health_is_503_when_database_is_down(async_client: AsyncClient):
    broken = AsyncMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

    async def _broken_db():
        yield broken

    app.dependency_overrides[get_db] = _broken_db
    resp = await async_client.get(f"{API}/health/ready")

    assert resp.status_code == 503
    assert resp.json()["status"] == "Unhealthy"
    assert resp.json()["checks"][0]["status"] == "Unhealthy"
    # Liveness never touches the database
    assert (await async_client.get(f"{API}/health/live")).status_code == 200
