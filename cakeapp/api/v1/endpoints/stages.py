"""
Production stage endpoints (Baking → Decorating → Packaging ...).

Customers may read the stages of their own orders; only admins write.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cakeapp.api.v1.deps import (ensure_self_or_admin, get_current_claims,
                                 get_db, require_admin)
from cakeapp.api.v1.endpoints.orders import get_order_or_404
from cakeapp.models.cake import CakeStage
from cakeapp.schemas.cake import (DeleteResponse, StageCreate, StageRead,
                                  StageUpdate)
from cakeapp.schemas.token import TokenPayload

router = APIRouter(prefix="/stages", tags=["stages"])
logger = logging.getLogger(__name__)


async def _get_stage_or_404(db: AsyncSession, stage_id: int) -> CakeStage:
    result = await db.execute(select(CakeStage).where(CakeStage.id == stage_id))
    stage = result.scalar_one_or_none()
    if stage is None:
        raise HTTPException(status_code=404, detail="Stage not found")
    return stage


@router.get("", response_model=list[StageRead])
async def list_stages(
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> list[CakeStage]:
    result = await db.execute(select(CakeStage).order_by(CakeStage.id))
    return list(result.scalars().all())


@router.get("/order/{order_id}", response_model=list[StageRead])
async def list_stages_of_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> list[CakeStage]:
    order = await get_order_or_404(db, order_id)
    ensure_self_or_admin(claims, order.user_id)
    result = await db.execute(
        select(CakeStage).where(CakeStage.order_id == order_id).order_by(CakeStage.id)
    )
    return list(result.scalars().all())


@router.get("/{stage_id}", response_model=StageRead)
async def get_stage(
    stage_id: int,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> CakeStage:
    stage = await _get_stage_or_404(db, stage_id)
    order = await get_order_or_404(db, stage.order_id)
    ensure_self_or_admin(claims, order.user_id)
    return stage


@router.post("", response_model=StageRead, status_code=201)
async def create_stage(
    body: StageCreate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> CakeStage:
    await get_order_or_404(db, body.order_id)

    stage = CakeStage(**body.model_dump())
    db.add(stage)
    await db.commit()
    await db.refresh(stage)
    logger.info("Added stage '%s' to order %d", stage.stage_name, stage.order_id)
    return stage


@router.put("/{stage_id}", response_model=StageRead)
async def update_stage(
    stage_id: int,
    body: StageUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> CakeStage:
    stage = await _get_stage_or_404(db, stage_id)

    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(stage, field, value)

    await db.commit()
    await db.refresh(stage)
    logger.info("Updated stage %d", stage_id)
    return stage


@router.delete("/{stage_id}", response_model=DeleteResponse)
async def delete_stage(
    stage_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> DeleteResponse:
    stage = await _get_stage_or_404(db, stage_id)
    await db.delete(stage)
    await db.commit()
    logger.info("Deleted stage %d", stage_id)
    return DeleteResponse(success=True, message="Stage deleted successfully")
