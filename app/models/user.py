"""
User model — credentials, role and soft-delete bookkeeping.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.mixins import SoftDeleteMixin


class UserRole(str, enum.Enum):
    EMPLOYEE = "EMPLOYEE"
    JURY = "JURY"  # administrator


class User(SoftDeleteMixin, Base):
    __tablename__ = "users"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    # Stored lower-cased; unique across all rows, deleted ones included
    email: str = Column(String(200), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    role: UserRole = Column(  # type: ignore[assignment]
        Enum(UserRole, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=UserRole.EMPLOYEE,
    )
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
