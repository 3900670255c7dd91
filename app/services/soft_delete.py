"""
Soft delete / restore for every entity carrying ``SoftDeleteMixin``.

Normal reads filter with :func:`not_deleted`; delete and restore look rows
up by primary key *including* deleted ones so they can find their target.
Deleting a user flags its expenses, penalties and logs in the same
transaction with the same timestamp and actor.  Restoring a user does not
bring those dependents back.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotDeletedError, NotFoundError, ValidationFailedError
from app.models.expense import Expense
from app.models.log import Log
from app.models.mixins import SoftDeleteMixin
from app.models.penalty import Penalty
from app.models.user import User

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=SoftDeleteMixin)

# Rows owned by a user that follow it into the deleted state
USER_DEPENDENTS: tuple[type[SoftDeleteMixin], ...] = (Expense, Penalty, Log)


def not_deleted(model: type[SoftDeleteMixin]):
    """WHERE clause for the default (live rows only) read path."""
    return model.is_deleted.is_(False)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class UserDeletion:
    user_id: uuid.UUID
    deleted_at: datetime
    deleted_by: uuid.UUID | None
    expenses: int
    penalties: int
    logs: int

    @property
    def dependents(self) -> int:
        return self.expenses + self.penalties + self.logs


async def get_live(db: AsyncSession, model: type[M], entity_id: uuid.UUID) -> M:
    """Fetch a non-deleted row or raise ``NotFoundError``."""
    entity = await db.get(model, entity_id)
    if entity is None or entity.is_deleted:
        raise NotFoundError(f"{model.__name__} not found")
    return entity


async def ensure_live_owner(db: AsyncSession, user_id: uuid.UUID) -> User:
    """Dependent records may only point at a live user (400 on ``userId`` otherwise)."""
    owner = await db.get(User, user_id)
    if owner is None or owner.is_deleted:
        raise ValidationFailedError("userId", f"User with id {user_id} does not exist.")
    return owner


def _mark_deleted(entity: SoftDeleteMixin, when: datetime, actor_id: uuid.UUID | None) -> None:
    entity.is_deleted = True
    entity.deleted_at = when
    entity.deleted_by = actor_id


async def soft_delete(
    db: AsyncSession,
    model: type[M],
    entity_id: uuid.UUID,
    actor_id: uuid.UUID | None,
) -> M:
    # "Already deleted" and "never existed" look the same to the caller
    entity = await get_live(db, model, entity_id)
    _mark_deleted(entity, datetime.now(timezone.utc), actor_id)
    await db.commit()
    logger.info("Soft-deleted %s %s (by %s)", model.__name__, entity_id, actor_id)
    return entity


async def restore(db: AsyncSession, model: type[M], entity_id: uuid.UUID) -> M:
    entity = await db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(f"{model.__name__} not found")
    if not entity.is_deleted:
        raise NotDeletedError(f"{model.__name__} is not deleted.")

    entity.is_deleted = False
    entity.deleted_at = None
    entity.deleted_by = None
    await db.commit()
    logger.info("Restored %s %s", model.__name__, entity_id)
    return entity


async def soft_delete_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    actor_id: uuid.UUID | None,
) -> UserDeletion:
    """Soft-delete a user and cascade to its live dependents in one transaction."""
    user = await get_live(db, User, user_id)
    now = datetime.now(timezone.utc)

    counts: dict[str, int] = {}
    try:
        for model in USER_DEPENDENTS:
            result = await db.execute(
                update(model)
                .where(model.user_id == user_id, not_deleted(model))  # type: ignore[attr-defined]
                .values(is_deleted=True, deleted_at=now, deleted_by=actor_id)
                .execution_options(synchronize_session=False)
            )
            counts[model.__tablename__] = result.rowcount  # type: ignore[attr-defined]
        _mark_deleted(user, now, actor_id)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error("Cascading delete of user %s rolled back", user_id)
        raise

    deletion = UserDeletion(
        user_id=user_id,
        deleted_at=now,
        deleted_by=actor_id,
        expenses=counts["expenses"],
        penalties=counts["penalties"],
        logs=counts["logs"],
    )
    logger.info(
        "Soft-deleted user %s (by %s) with %d expenses, %d penalties, %d logs",
        user_id,
        actor_id,
        deletion.expenses,
        deletion.penalties,
        deletion.logs,
    )
    return deletion
