"""
Jury Office API — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from app import models  # noqa: F401  (register every table on Base.metadata)
from app.api.v1.api import api_router
from app.core.config import is_auth_enabled, settings
from app.core.exceptions import register_exception_handlers
from app.core.rate_limit import limiter
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import async_session_factory, engine
from app.models.user import User, UserRole

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_first_jury() -> None:
    """Create the bootstrap JURY account unless its email is already taken."""
    email = settings.FIRST_JURY_EMAIL.strip().lower()
    async with async_session_factory() as session:
        result = await session.execute(select(User.id).where(User.email == email))
        if result.first() is not None:
            return
        session.add(
            User(
                name=settings.FIRST_JURY_NAME,
                email=email,
                hashed_password=get_password_hash(settings.FIRST_JURY_PASSWORD),
                role=UserRole.JURY,
            )
        )
        await session.commit()
        logger.info("Default jury member created: %s (password: <redacted>)", email)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_first_jury()

    logger.info(
        "Jury Office API v%s started (authorization %s)",
        settings.VERSION,
        "enabled" if is_auth_enabled(settings) else "DISABLED",
    )
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Jury / employee office administration API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.limiter = limiter

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()
