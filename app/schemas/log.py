"""Pydantic schemas for audit log entries."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.user import UserRead


class LogCreate(CamelModel):
    user_id: uuid.UUID
    action: str = Field(min_length=1, max_length=200)
    result: str | None = Field(default=None, max_length=1000)


class LogUpdate(LogCreate):
    id: uuid.UUID


class LogRead(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    action: str
    result: str | None
    created_at: datetime | None
    user: UserRead | None = None
