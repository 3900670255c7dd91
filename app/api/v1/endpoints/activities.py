"""
Activity endpoints — scheduled office activities, newest first.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import PaginationParams, actor_id, get_db, get_pagination, require_jury, require_user
from app.core.exceptions import ValidationFailedError
from app.core.security import Principal
from app.models.activity import Activity
from app.schemas.catalog import ActivityCreate, ActivityRead, ActivityUpdate
from app.schemas.common import MessageResponse, PagedResponse
from app.services import soft_delete
from app.services.listing import paginate
from app.services.soft_delete import not_deleted

router = APIRouter(prefix="/activities", tags=["activities"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PagedResponse[ActivityRead])
async def list_activities(
    paging: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> dict:
    query = select(Activity).where(not_deleted(Activity)).order_by(Activity.date.desc())
    return await paginate(db, query, paging.page, paging.page_size)


@router.get("/{activity_id}", response_model=ActivityRead)
async def get_activity(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Activity:
    return await soft_delete.get_live(db, Activity, activity_id)


@router.post("", response_model=ActivityRead, status_code=201)
async def create_activity(
    body: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Activity:
    activity = Activity(
        name=body.name,
        description=body.description,
        date=body.date or datetime.now(timezone.utc),
    )
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity


@router.put("/{activity_id}", response_model=ActivityRead)
async def update_activity(
    activity_id: uuid.UUID,
    body: ActivityUpdate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Activity:
    if body.id != activity_id:
        raise ValidationFailedError("id", "Identifier mismatch between route and payload.")

    activity = await soft_delete.get_live(db, Activity, activity_id)
    activity.name = body.name
    activity.description = body.description
    activity.date = body.date
    await db.commit()
    await db.refresh(activity)
    return activity


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Principal | None = Depends(require_user),
) -> Response:
    await soft_delete.soft_delete(db, Activity, activity_id, actor_id(caller))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{activity_id}/restore", response_model=MessageResponse)
async def restore_activity(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    await soft_delete.restore(db, Activity, activity_id)
    return MessageResponse(message="Activity restored successfully.")
