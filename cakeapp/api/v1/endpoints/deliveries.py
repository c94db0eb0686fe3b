"""
Delivery scheduling endpoints.

Customers may read deliveries of their own orders; scheduling, updates
and deletes are admin-only.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cakeapp.api.v1.deps import (ensure_self_or_admin, get_current_claims,
                                 get_db, require_admin)
from cakeapp.api.v1.endpoints.orders import get_order_or_404
from cakeapp.models.delivery import Delivery
from cakeapp.schemas.cake import DeleteResponse
from cakeapp.schemas.delivery import (DeliveryCreate, DeliveryRead,
                                      DeliveryUpdate)
from cakeapp.schemas.token import TokenPayload

router = APIRouter(prefix="/deliveries", tags=["deliveries"])
logger = logging.getLogger(__name__)


async def _get_delivery_or_404(db: AsyncSession, delivery_id: int) -> Delivery:
    result = await db.execute(select(Delivery).where(Delivery.id == delivery_id))
    delivery = result.scalar_one_or_none()
    if delivery is None:
        raise HTTPException(status_code=404, detail="Delivery not found")
    return delivery


@router.get("", response_model=list[DeliveryRead])
async def list_deliveries(
    status: str | None = None,
    skip: int = 0,
    limit: int = Query(default=100, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> list[Delivery]:
    query = select(Delivery).order_by(Delivery.delivery_date, Delivery.id).offset(skip).limit(limit)
    if status:
        query = query.where(Delivery.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{delivery_id}", response_model=DeliveryRead)
async def get_delivery(
    delivery_id: int,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> Delivery:
    delivery = await _get_delivery_or_404(db, delivery_id)
    order = await get_order_or_404(db, delivery.order_id)
    ensure_self_or_admin(claims, order.user_id)
    return delivery


@router.post("", response_model=DeliveryRead, status_code=201)
async def schedule_delivery(
    body: DeliveryCreate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> Delivery:
    await get_order_or_404(db, body.order_id)

    delivery = Delivery(**body.model_dump())
    db.add(delivery)
    await db.commit()
    await db.refresh(delivery)
    logger.info("Scheduled delivery %d for order %d on %s", delivery.id, delivery.order_id, delivery.delivery_date)
    return delivery


@router.put("/{delivery_id}", response_model=DeliveryRead)
async def update_delivery(
    delivery_id: int,
    body: DeliveryUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> Delivery:
    delivery = await _get_delivery_or_404(db, delivery_id)

    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(delivery, field, value)

    await db.commit()
    await db.refresh(delivery)
    logger.info("Updated delivery %d", delivery_id)
    return delivery


@router.delete("/{delivery_id}", response_model=DeleteResponse)
async def delete_delivery(
    delivery_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> DeleteResponse:
    delivery = await _get_delivery_or_404(db, delivery_id)
    await db.delete(delivery)
    await db.commit()
    logger.info("Deleted delivery %d", delivery_id)
    return DeleteResponse(success=True, message="Delivery deleted successfully")
