"""
Penalty endpoints.

- Every operation requires an authenticated user; restore requires JURY.
- The owning user must exist and not be deleted.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status
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
from app.core.exceptions import ValidationFailedError
from app.core.security import Principal
from app.models.penalty import Penalty
from app.schemas.common import MessageResponse, PagedResponse
from app.schemas.penalty import PenaltyCreate, PenaltyRead, PenaltyUpdate
from app.services import soft_delete
from app.services.listing import paginate
from app.services.soft_delete import not_deleted

router = APIRouter(prefix="/penalties", tags=["penalties"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PagedResponse[PenaltyRead])
async def list_penalties(
    user_id: uuid.UUID | None = Query(default=None, alias="userId"),
    paging: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> dict:
    query = select(Penalty).where(not_deleted(Penalty))
    if user_id is not None:
        query = query.where(Penalty.user_id == user_id)
    query = query.order_by(Penalty.date.desc(), Penalty.created_at.desc())
    return await paginate(db, query, paging.page, paging.page_size)


@router.get("/{penalty_id}", response_model=PenaltyRead)
async def get_penalty(
    penalty_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Penalty:
    return await soft_delete.get_live(db, Penalty, penalty_id)


@router.post("", response_model=PenaltyRead, status_code=201)
async def create_penalty(
    body: PenaltyCreate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Penalty:
    owner = await soft_delete.ensure_live_owner(db, body.user_id)
    penalty = Penalty(
        user=owner,
        category=body.category,
        reason=body.reason,
        description=body.description,
        amount=body.amount,
        status=body.status,
        date=body.date or datetime.now(timezone.utc),
    )
    db.add(penalty)
    await db.commit()
    await db.refresh(penalty)
    logger.info("Created penalty %s for user %s", penalty.id, owner.id)
    return penalty


@router.put("/{penalty_id}", response_model=PenaltyRead)
async def update_penalty(
    penalty_id: uuid.UUID,
    body: PenaltyUpdate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Penalty:
    if body.id != penalty_id:
        raise ValidationFailedError("id", "Identifier mismatch between route and payload.")

    penalty = await soft_delete.get_live(db, Penalty, penalty_id)
    penalty.user = await soft_delete.ensure_live_owner(db, body.user_id)
    for field in ("category", "reason", "description", "amount", "status", "date"):
        setattr(penalty, field, getattr(body, field))

    await db.commit()
    await db.refresh(penalty)
    logger.info("Updated penalty %s", penalty_id)
    return penalty


@router.delete("/{penalty_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_penalty(
    penalty_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Principal | None = Depends(require_user),
) -> Response:
    await soft_delete.soft_delete(db, Penalty, penalty_id, actor_id(caller))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{penalty_id}/restore", response_model=MessageResponse)
async def restore_penalty(
    penalty_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    await soft_delete.restore(db, Penalty, penalty_id)
    return MessageResponse(message="Penalty restored successfully.")
