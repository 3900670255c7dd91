"""
Soft-delete columns shared by every entity that supports delete / restore.

Mixin columns stay unannotated: declarative copies them onto each table
and only accepts ``Mapped[...]`` annotations there.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Uuid


class SoftDeleteMixin:
    is_deleted = Column(Boolean, nullable=False, default=False, server_default="false", index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Uuid, nullable=True)
