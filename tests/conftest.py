"""
Shared test fixtures for the Jury Office API test suite.

Every test gets its own in-memory aiosqlite database; auth keys are set
before the application is imported so authorization is enabled by default.
"""

import base64
import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTH_SIGNING_KEY"] = base64.b64encode(b"s" * 32).decode()
os.environ["AUTH_ENCRYPTION_KEY"] = base64.b64encode(b"e" * 32).decode()
os.environ["AUTH_ISSUER"] = "jury-api-tests"
os.environ["AUTH_AUDIENCE"] = "jury-frontend-tests"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db
from app.core.config import settings
from app.core.security import TokenService, get_password_hash
from app.db.base import Base
from app.main import app
from app.models.user import User, UserRole

API = "/api/v1"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app and the per-test database."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(settings)


# ── Users & tokens ──────────────────────────────────────────────────
@pytest.fixture
def make_user(session_factory):
    """Insert a user straight into the database and return it."""

    async def _make(
        email: str,
        role: UserRole = UserRole.EMPLOYEE,
        name: str | None = None,
        password: str = "secret123",
    ) -> User:
        async with session_factory() as session:
            user = User(
                name=name or email.split("@")[0].title(),
                email=email,
                hashed_password=get_password_hash(password),
                role=role,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make


@pytest.fixture
async def jury_user(make_user) -> User:
    return await make_user("jury@office.test", UserRole.JURY, name="Judith Jury")


@pytest.fixture
async def employee_user(make_user) -> User:
    return await make_user("emp@office.test", UserRole.EMPLOYEE, name="Eddie Employee")


@pytest.fixture
def jury_headers(jury_user, token_service) -> dict[str, str]:
    token = token_service.generate_tokens(jury_user, "127.0.0.1").access_token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers(employee_user, token_service) -> dict[str, str]:
    token = token_service.generate_tokens(employee_user, "127.0.0.1").access_token
    return {"Authorization": f"Bearer {token}"}
