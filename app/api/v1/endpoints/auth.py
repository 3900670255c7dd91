"""
Auth endpoints — login, registration, refresh-token rotation and revocation.

Login, register and refresh are anonymous and rate limited per client IP.
Failures never say which part of the credentials was wrong.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.v1.deps import client_ip, get_auth_service, require_user
from app.core.exceptions import ConflictError, NotFoundError
from app.core.rate_limit import limiter
from app.core.security import IssuedTokens, Principal
from app.models.user import User
from app.schemas.token import LoginRequest, LoginResponse, RefreshTokenRequest, RegisterRequest
from app.schemas.user import UserRead
from app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _session_response(issued: IssuedTokens) -> LoginResponse:
    return LoginResponse(
        token=issued.access_token,
        refresh_token=issued.refresh_token,
        expires_at=issued.expires_at,
        user=UserRead.model_validate(issued.user),
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    issued = await auth.login(body.email, body.password, client_ip(request))
    if issued is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _session_response(issued)


@router.post("/register", response_model=LoginResponse, status_code=201)
@limiter.limit("5/minute")
async def register(
    request: Request,
    body: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Create the account, then log it in with the same credentials."""
    user = await auth.register(body.name, body.email, body.password, body.role)
    if user is None:
        raise ConflictError("Email address is already registered")

    issued = await auth.login(body.email, body.password, client_ip(request))
    if issued is None:
        logger.error("Implicit login after registering user %s failed", user.id)
        raise HTTPException(status_code=500, detail="Internal server error")
    return _session_response(issued)


@router.post("/refresh", response_model=LoginResponse)
@limiter.limit("10/minute")
async def refresh(
    request: Request,
    body: RefreshTokenRequest,
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    issued = await auth.refresh_token(body.refresh_token, client_ip(request))
    if issued is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
    return _session_response(issued)


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
async def revoke(
    request: Request,
    body: RefreshTokenRequest,
    auth: AuthService = Depends(get_auth_service),
    _caller: Principal | None = Depends(require_user),
) -> Response:
    if not await auth.revoke_token(body.refresh_token, client_ip(request)):
        raise HTTPException(status_code=400, detail="Invalid refresh token")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead)
async def read_current_user(
    auth: AuthService = Depends(get_auth_service),
    caller: Principal | None = Depends(require_user),
) -> User:
    """Profile of the caller; needs a token even when authorization is disabled."""
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await auth.get_user_by_id(caller.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
