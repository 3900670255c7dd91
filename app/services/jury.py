"""
Jury appointment — swap the whole jury in one transaction.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationFailedError
from app.models.user import User, UserRole
from app.services.soft_delete import not_deleted

logger = logging.getLogger(__name__)

MIN_JURY_SIZE = 2
MAX_JURY_SIZE = 3


async def appoint_jury(db: AsyncSession, user_ids: list[uuid.UUID]) -> list[User]:
    """Demote every current JURY user, then promote exactly *user_ids*.

    All preconditions are checked before anything is written; the demotion
    and promotion commit together or not at all.
    """
    if not MIN_JURY_SIZE <= len(user_ids) <= MAX_JURY_SIZE:
        raise ValidationFailedError(
            "userIds", f"You must select between {MIN_JURY_SIZE} and {MAX_JURY_SIZE} users."
        )
    if len(set(user_ids)) != len(user_ids):
        raise ValidationFailedError("userIds", "Duplicate user IDs are not allowed.")

    result = await db.execute(select(User).where(User.id.in_(user_ids), not_deleted(User)))
    selected = list(result.scalars().all())
    if len(selected) != len(user_ids):
        found = {u.id for u in selected}
        missing = ", ".join(str(uid) for uid in user_ids if uid not in found)
        raise ValidationFailedError(
            "userIds", f"One or more selected users do not exist. Missing IDs: {missing}"
        )

    try:
        # Deleted jury members are demoted too so a later restore cannot add a fourth
        current = await db.execute(select(User).where(User.role == UserRole.JURY))
        for member in current.scalars().all():
            member.role = UserRole.EMPLOYEE
        for member in selected:
            member.role = UserRole.JURY
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error("Jury appointment rolled back")
        raise

    logger.info("Appointed jury: %s", ", ".join(str(u.id) for u in selected))
    return selected
