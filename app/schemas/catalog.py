"""Pydantic schemas for tiers and activities."""

from __future__ import annotations

import json
import uuid
from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.common import CamelModel


class TierCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    costs_json: str = Field(min_length=1)

    @field_validator("costs_json")
    @classmethod
    def _valid_json(cls, v: str) -> str:
        try:
            json.loads(v)
        except json.JSONDecodeError as exc:
            raise ValueError(f"costsJson must be valid JSON ({exc.msg})") from exc
        return v


class TierUpdate(TierCreate):
    id: uuid.UUID


class TierRead(CamelModel):
    id: uuid.UUID
    name: str
    description: str | None
    costs_json: str


class ActivityCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    date: datetime | None = None


class ActivityUpdate(ActivityCreate):
    id: uuid.UUID
    date: datetime  # type: ignore[assignment]


class ActivityRead(CamelModel):
    id: uuid.UUID
    name: str
    description: str | None
    date: datetime
    created_at: datetime | None
