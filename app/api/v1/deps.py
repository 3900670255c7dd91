"""
FastAPI dependencies — database session, caller identity and role guards.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import (
    REQUIRE_JURY,
    REQUIRE_JURY_OR_EMPLOYEE,
    Decision,
    RoleRequirement,
    authorize,
)
from app.core.config import Settings, get_settings, is_auth_enabled
from app.core.security import Principal, TokenService
from app.db.session import async_session_factory
from app.services.auth import AuthService

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is a 401 only when auth is enabled
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Services ────────────────────────────────────────────────────────
def get_token_service(config: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(config)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, tokens)


def client_ip(request: Request) -> str:
    """First ``X-Forwarded-For`` hop, else the socket peer, else ``"unknown"``."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


# ── Caller identity ─────────────────────────────────────────────────
async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme),
    config: Settings = Depends(get_settings),
) -> Principal | None:
    """Decode the bearer token; ``None`` when absent, invalid or auth is off."""
    if not token or not is_auth_enabled(config):
        return None
    result = TokenService(config).validate_token(token)
    if not result.is_valid:
        logger.info("Rejected access token: %s", result.error)
        return None
    return result.principal


def require_role(
    requirement: RoleRequirement,
) -> Callable[..., Awaitable[Principal | None]]:
    """Build the guard attached to a route for *requirement*.

    The guard returns the caller (``None`` in development mode) so handlers
    can record who acted.
    """

    async def guard(
        principal: Principal | None = Depends(get_current_principal),
        config: Settings = Depends(get_settings),
    ) -> Principal | None:
        decision = authorize(config, principal, requirement)
        if decision is Decision.UNAUTHENTICATED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if decision is Decision.FORBIDDEN:
            logger.info(
                "Forbidden: user %s with role %r needs %s",
                principal.user_id if principal else None,
                principal.role if principal else None,
                requirement.name,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return principal

    guard.__name__ = f"require_{requirement.name}"
    return guard


require_jury = require_role(REQUIRE_JURY)
require_user = require_role(REQUIRE_JURY_OR_EMPLOYEE)


def actor_id(principal: Principal | None) -> uuid.UUID | None:
    return principal.user_id if principal else None


# ── Pagination ──────────────────────────────────────────────────────
@dataclass
class PaginationParams:
    page: int
    page_size: int


def get_pagination(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
) -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size)
