"""
User management endpoints.

- GET operations require any authenticated user.
- Create / update / delete / restore / appoint-jury require the JURY role.
- DELETE cascades to the user's expenses, penalties and logs.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import (
    PaginationParams,
    actor_id,
    get_db,
    get_pagination,
    require_jury,
    require_user,
)
from app.core.exceptions import ConflictError, ValidationFailedError
from app.core.security import Principal, get_password_hash
from app.models.user import User
from app.schemas.common import MessageResponse, PagedResponse
from app.schemas.user import AppointJuryRequest, UserCreate, UserRead, UserUpdate
from app.services import jury, soft_delete
from app.services.listing import paginate
from app.services.soft_delete import not_deleted

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


async def _email_taken(db: AsyncSession, email: str, exclude_id: uuid.UUID | None = None) -> bool:
    # Deleted users keep their email; the unique index spans every row
    query = select(User.id).where(User.email == email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    return (await db.execute(query)).first() is not None


@router.get("", response_model=PagedResponse[UserRead])
async def list_users(
    paging: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> dict:
    query = select(User).where(not_deleted(User)).order_by(User.name, User.email)
    return await paginate(db, query, paging.page, paging.page_size)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> User:
    return await soft_delete.get_live(db, User, user_id)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> User:
    if await _email_taken(db, body.email):
        raise ConflictError("Email address is already registered")

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=body.role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created user %s with role %s", user.id, user.role.value)
    return user


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> User:
    if body.id != user_id:
        raise ValidationFailedError("id", "Identifier mismatch between route and payload.")

    user = await soft_delete.get_live(db, User, user_id)
    if await _email_taken(db, body.email, exclude_id=user_id):
        raise ConflictError("Email address is already registered")

    user.name = body.name
    user.email = body.email
    user.role = body.role
    if body.password:
        user.hashed_password = get_password_hash(body.password)

    await db.commit()
    await db.refresh(user)
    logger.info("Updated user %s", user_id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    jury_member: Principal | None = Depends(require_jury),
) -> Response:
    """Soft-delete a user together with its expenses, penalties and logs."""
    await soft_delete.soft_delete_user(db, user_id, actor_id(jury_member))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/restore", response_model=MessageResponse)
async def restore_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    """Restore a user. Records deleted along with it stay deleted."""
    await soft_delete.restore(db, User, user_id)
    return MessageResponse(message="User restored successfully.")


@router.post("/appoint-jury", response_model=MessageResponse)
async def appoint_jury(
    body: AppointJuryRequest,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    await jury.appoint_jury(db, body.user_ids)
    return MessageResponse(message="Jury members have been successfully appointed.")
