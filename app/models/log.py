"""
Log model — audit trail of actions performed by or on behalf of a user.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.mixins import SoftDeleteMixin


class Log(SoftDeleteMixin, Base):
    __tablename__ = "logs"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    user_id: uuid.UUID = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    action: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    result: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    user = relationship("User", lazy="joined", innerjoin=True)
