"""Pydantic schemas for User CRUD and jury appointment."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field, field_validator

from app.models.user import UserRole
from app.schemas.common import CamelModel


def normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v


class UserRead(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    created_at: datetime | None


class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(max_length=200)
    password: str = Field(min_length=6, max_length=100)
    role: UserRole = UserRole.EMPLOYEE

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)


class UserUpdate(UserCreate):
    id: uuid.UUID
    password: str | None = Field(default=None, min_length=6, max_length=100)  # type: ignore[assignment]
    role: UserRole


class AppointJuryRequest(CamelModel):
    # Size and uniqueness are enforced by the service so each gets its own error
    user_ids: list[uuid.UUID]
