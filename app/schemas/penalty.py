"""Pydantic schemas for penalties."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.user import UserRead


class PenaltyCreate(CamelModel):
    user_id: uuid.UUID
    category: str = Field(min_length=1, max_length=100)
    reason: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    amount: int = Field(ge=0)
    status: str = Field(min_length=1, max_length=50)
    date: datetime | None = None


class PenaltyUpdate(PenaltyCreate):
    id: uuid.UUID
    date: datetime  # type: ignore[assignment]


class PenaltyRead(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    category: str
    reason: str
    description: str | None
    amount: int
    status: str
    date: datetime
    created_at: datetime | None
    user: UserRead | None = None
