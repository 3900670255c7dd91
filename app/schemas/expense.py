"""Pydantic schemas for expenses."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, Money
from app.schemas.user import UserRead


class ExpenseCreate(CamelModel):
    user_id: uuid.UUID
    total_collection: Money
    bill: Money
    arrears: Money
    notes: str | None = Field(default=None, max_length=2000)
    status: str = Field(min_length=1, max_length=100)
    date: datetime | None = None


class ExpenseUpdate(ExpenseCreate):
    id: uuid.UUID
    date: datetime  # type: ignore[assignment]


class ExpenseRead(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    total_collection: Money
    bill: Money
    arrears: Money
    notes: str | None
    status: str
    date: datetime
    created_at: datetime | None
    user: UserRead | None = None
