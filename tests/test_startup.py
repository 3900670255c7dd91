"""Start-up wiring: engine construction and the bootstrap jury account."""

import pytest
from sqlalchemy import select
from sqlalchemy.pool import StaticPool

from app import main
from app.core.config import Settings
from app.core.security import verify_password
from app.db.session import build_engine
from app.models.user import User, UserRole


def test_in_memory_sqlite_shares_one_connection():
    engine = build_engine(Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///:memory:"))
    assert isinstance(engine.pool, StaticPool)


def test_postgres_pool_follows_settings():
    engine = build_engine(
        Settings(
            _env_file=None,
            DATABASE_URL="postgresql+asyncpg://u:p@localhost:5432/db",
            DB_POOL_SIZE=3,
            DB_MAX_OVERFLOW=1,
        )
    )
    assert engine.pool.size() == 3
    assert engine.dialect.name == "postgresql"


@pytest.mark.asyncio
async def test_seed_creates_jury_once(monkeypatch, session_factory):
    monkeypatch.setattr(main, "async_session_factory", session_factory)
    monkeypatch.setattr(main.settings, "FIRST_JURY_EMAIL", " Boss@Office.test ")
    monkeypatch.setattr(main.settings, "FIRST_JURY_PASSWORD", "bootstrap-pw")

    await main.seed_first_jury()
    await main.seed_first_jury()

    async with session_factory() as session:
        users = (await session.execute(select(User))).scalars().all()
    assert len(users) == 1
    assert users[0].email == "boss@office.test"
    assert users[0].role is UserRole.JURY
    assert verify_password("bootstrap-pw", users[0].hashed_password)


@pytest.mark.asyncio
async def test_seed_skips_taken_email(monkeypatch, session_factory, make_user):
    await make_user("boss@office.test", UserRole.EMPLOYEE)
    monkeypatch.setattr(main, "async_session_factory", session_factory)
    monkeypatch.setattr(main.settings, "FIRST_JURY_EMAIL", "boss@office.test")

    await main.seed_first_jury()

    async with session_factory() as session:
        user = (await session.execute(select(User))).scalar_one()
    assert user.role is UserRole.EMPLOYEE
