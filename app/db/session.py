"""
Async SQLAlchemy engine & session factory.

PostgreSQL (asyncpg) gets a sized connection pool; SQLite (aiosqlite) is
for local runs, and an in-memory URL shares one connection so every
session sees the same database.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    url = make_url(config.DATABASE_URL)
    options: dict[str, Any] = {"echo": config.DB_ECHO}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
    else:
        options.update(
            pool_pre_ping=True,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_recycle=300,
        )

    return create_async_engine(url, **options)


engine = build_engine(settings)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
