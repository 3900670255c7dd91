"""
Audit log endpoints.
"""

from __future__ import annotations

import logging
import uuid

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
from app.models.log import Log
from app.schemas.common import MessageResponse, PagedResponse
from app.schemas.log import LogCreate, LogRead, LogUpdate
from app.services import soft_delete
from app.services.listing import paginate
from app.services.soft_delete import not_deleted

router = APIRouter(prefix="/logs", tags=["logs"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PagedResponse[LogRead])
async def list_logs(
    user_id: uuid.UUID | None = Query(default=None, alias="userId"),
    paging: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> dict:
    query = select(Log).where(not_deleted(Log))
    if user_id is not None:
        query = query.where(Log.user_id == user_id)
    return await paginate(db, query.order_by(Log.created_at.desc()), paging.page, paging.page_size)


@router.get("/{log_id}", response_model=LogRead)
async def get_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Log:
    return await soft_delete.get_live(db, Log, log_id)


@router.post("", response_model=LogRead, status_code=201)
async def create_log(
    body: LogCreate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Log:
    owner = await soft_delete.ensure_live_owner(db, body.user_id)
    entry = Log(user=owner, action=body.action, result=body.result)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@router.put("/{log_id}", response_model=LogRead)
async def update_log(
    log_id: uuid.UUID,
    body: LogUpdate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Log:
    if body.id != log_id:
        raise ValidationFailedError("id", "Identifier mismatch between route and payload.")

    entry = await soft_delete.get_live(db, Log, log_id)
    entry.user = await soft_delete.ensure_live_owner(db, body.user_id)
    entry.action = body.action
    entry.result = body.result
    await db.commit()
    await db.refresh(entry)
    return entry


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Principal | None = Depends(require_user),
) -> Response:
    await soft_delete.soft_delete(db, Log, log_id, actor_id(caller))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{log_id}/restore", response_model=MessageResponse)
async def restore_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    await soft_delete.restore(db, Log, log_id)
    return MessageResponse(message="Log restored successfully.")
