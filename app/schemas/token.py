"""Pydantic schemas for the auth endpoints (login / register / refresh / revoke)."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.user import UserCreate, UserRead, normalise_email


class LoginRequest(CamelModel):
    email: str = Field(max_length=200)
    password: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)


class RegisterRequest(UserCreate):
    pass


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(min_length=1, max_length=128)


class LoginResponse(CamelModel):
    token: str
    refresh_token: str
    expires_at: datetime
    user: UserRead
