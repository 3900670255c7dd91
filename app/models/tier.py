"""
Tier model — named cost tiers; ``costs_json`` holds a free-form JSON document.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Column, String, Text, Uuid

from app.db.base import Base
from app.models.mixins import SoftDeleteMixin


class Tier(SoftDeleteMixin, Base):
    __tablename__ = "tiers"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(String(2000), nullable=True)  # type: ignore[assignment]
    costs_json: str = Column(Text, nullable=False)  # type: ignore[assignment]
