"""
Tier endpoints — reference price tiers with a free-form JSON cost table.

Reads are open to any authenticated user; every write requires JURY.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import PaginationParams, actor_id, get_db, get_pagination, require_jury, require_user
from app.core.exceptions import ValidationFailedError
from app.core.security import Principal
from app.models.tier import Tier
from app.schemas.catalog import TierCreate, TierRead, TierUpdate
from app.schemas.common import MessageResponse, PagedResponse
from app.services import soft_delete
from app.services.listing import paginate
from app.services.soft_delete import not_deleted

router = APIRouter(prefix="/tiers", tags=["tiers"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PagedResponse[TierRead])
async def list_tiers(
    paging: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> dict:
    query = select(Tier).where(not_deleted(Tier)).order_by(Tier.name)
    return await paginate(db, query, paging.page, paging.page_size)


@router.get("/{tier_id}", response_model=TierRead)
async def get_tier(
    tier_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: Principal | None = Depends(require_user),
) -> Tier:
    return await soft_delete.get_live(db, Tier, tier_id)


@router.post("", response_model=TierRead, status_code=201)
async def create_tier(
    body: TierCreate,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> Tier:
    tier = Tier(name=body.name, description=body.description, costs_json=body.costs_json)
    db.add(tier)
    await db.commit()
    await db.refresh(tier)
    logger.info("Created tier %s (%s)", tier.id, tier.name)
    return tier


@router.put("/{tier_id}", response_model=TierRead)
async def update_tier(
    tier_id: uuid.UUID,
    body: TierUpdate,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> Tier:
    if body.id != tier_id:
        raise ValidationFailedError("id", "Identifier mismatch between route and payload.")

    tier = await soft_delete.get_live(db, Tier, tier_id)
    tier.name = body.name
    tier.description = body.description
    tier.costs_json = body.costs_json
    await db.commit()
    await db.refresh(tier)
    logger.info("Updated tier %s", tier_id)
    return tier


@router.delete("/{tier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tier(
    tier_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    jury_member: Principal | None = Depends(require_jury),
) -> Response:
    await soft_delete.soft_delete(db, Tier, tier_id, actor_id(jury_member))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{tier_id}/restore", response_model=MessageResponse)
async def restore_tier(
    tier_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _jury: Principal | None = Depends(require_jury),
) -> MessageResponse:
    await soft_delete.restore(db, Tier, tier_id)
    return MessageResponse(message="Tier restored successfully.")
