"""
Expense model — collections, bills and arrears per user.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.mixins import SoftDeleteMixin


class Expense(SoftDeleteMixin, Base):
    __tablename__ = "expenses"
    __table_args__ = (Index("ix_expenses_user_date", "user_id", "date"),)

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    user_id: uuid.UUID = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    total_collection: Decimal = Column(Numeric(18, 2), nullable=False)  # type: ignore[assignment]
    bill: Decimal = Column(Numeric(18, 2), nullable=False)  # type: ignore[assignment]
    arrears: Decimal = Column(Numeric(18, 2), nullable=False)  # type: ignore[assignment]
    notes: str | None = Column(String(2000), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(100), nullable=False)  # type: ignore[assignment]
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
