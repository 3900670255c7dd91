"""
RefreshToken model — opaque refresh tokens and their rotation chain.

Rows are never deleted: a rotated token points at its replacement and a
revoked token keeps the revoking IP and time.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    token: str = Column(String(128), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    user_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    is_revoked: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    revoked_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    revoked_by_ip: str | None = Column(String(64), nullable=True)  # type: ignore[assignment]
    replaced_by_token: str | None = Column(String(128), nullable=True)  # type: ignore[assignment]

    user = relationship("User", back_populates="refresh_tokens")

    def is_active(self, now: datetime | None = None) -> bool:
        """Usable for refresh only when not revoked and not yet expired."""
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return not self.is_revoked and expires_at > now
