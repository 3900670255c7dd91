"""
Expense endpoints — monthly collection / bill / arrears per user.
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
from app.models.expense import Expense
from app.schemas.common import MessageResponse, PagedResponse
from app.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate
from app.services import soft_delete
from app.services.listing import paginate
from app.services.soft_delete import not_deleted

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger(__name__)

_EDITABLE = ("total_collection", "bill", "arrears", "notes", "status", "date")


@router.get("", response_model=PagedResponse[ExpenseRead])
async def list_expenses(
    user_id: uuid.UUID | None = Query(default=None, alias="userId"),
    paging: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> dict:
    query = select(Expense).where(not_deleted(Expense))
    if user_id is not None:
        query = query.where(Expense.user_id == user_id)
    query = query.order_by(Expense.date.desc(), Expense.created_at.desc())
    return await paginate(db, query, paging.page, paging.page_size)


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Expense:
    return await soft_delete.get_live(db, Expense, expense_id)


@router.post("", response_model=ExpenseRead, status_code=201)
async def create_expense(
    body: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Expense:
    owner = await soft_delete.ensure_live_owner(db, body.user_id)
    values = body.model_dump(include=set(_EDITABLE))
    values["date"] = values["date"] or datetime.now(timezone.utc)
    expense = Expense(user=owner, **values)
    db.add(expense)
    await db.commit()
    await db.refresh(expense)
    logger.info("Created expense %s for user %s", expense.id, owner.id)
    return expense


@router.put("/{expense_id}", response_model=ExpenseRead)
async def update_expense(
    expense_id: uuid.UUID,
    body: ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Expense:
    if body.id != expense_id:
        raise ValidationFailedError("id", "Identifier mismatch between route and payload.")

    expense = await soft_delete.get_live(db, Expense, expense_id)
    expense.user = await soft_delete.ensure_live_owner(db, body.user_id)
    for field, value in body.model_dump(include=set(_EDITABLE)).items():
        setattr(expense, field, value)

    await db.commit()
    await db.refresh(expense)
    logger.info("Updated expense %s", expense_id)
    return expense


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Principal | None = Depends(require_user),
) -> Response:
    await soft_delete.soft_delete(db, Expense, expense_id, actor_id(caller))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{expense_id}/restore", response_model=MessageResponse)
async def restore_expense(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    await soft_delete.restore(db, Expense, expense_id)
    return MessageResponse(message="Expense restored successfully.")
