"""
Penalty model — fines recorded against a user.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.mixins import SoftDeleteMixin


class Penalty(SoftDeleteMixin, Base):
    __tablename__ = "penalties"
    __table_args__ = (Index("ix_penalties_user_date", "user_id", "date"),)

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    user_id: uuid.UUID = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    category: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    reason: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(String(2000), nullable=True)  # type: ignore[assignment]
    amount: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    status: str = Column(String(50), nullable=False)  # type: ignore[assignment]
    date: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    user = relationship("User", lazy="joined", innerjoin=True)
