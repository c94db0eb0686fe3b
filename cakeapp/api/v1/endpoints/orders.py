"""
Cake order endpoints.

- Customers create, read and edit the details of their own orders.
- Admins see every order, move orders through statuses and delete them.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cakeapp.api.v1.deps import (ensure_self_or_admin, get_current_claims,
                                 get_db, require_admin)
from cakeapp.models.cake import CakeDesign, CakeOrder, CakeStage
from cakeapp.models.delivery import Delivery
from cakeapp.models.user import User
from cakeapp.schemas.cake import (DeleteResponse, OrderCreate,
                                  OrderDetailsUpdate, OrderRead,
                                  OrderStatusUpdate)
from cakeapp.schemas.token import TokenPayload

router = APIRouter(prefix="/orders", tags=["orders"])
logger = logging.getLogger(__name__)


async def get_order_or_404(db: AsyncSession, order_id: int) -> CakeOrder:
    result = await db.execute(select(CakeOrder).where(CakeOrder.id == order_id))
    order = result.scalar_one_or_none()
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


async def _ensure_design_exists(db: AsyncSession, design_id: int | None) -> None:
    if design_id is None:
        return
    result = await db.execute(select(CakeDesign.id).where(CakeDesign.id == design_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Design not found")


@router.get("", response_model=list[OrderRead])
async def list_orders(
    status: str | None = None,
    skip: int = 0,
    limit: int = Query(default=100, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> list[CakeOrder]:
    query = select(CakeOrder).order_by(CakeOrder.id.desc()).offset(skip).limit(limit)
    if status:
        query = query.where(CakeOrder.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/user/{user_id}", response_model=list[OrderRead])
async def list_orders_of_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> list[CakeOrder]:
    ensure_self_or_admin(claims, user_id)
    result = await db.execute(
        select(CakeOrder).where(CakeOrder.user_id == user_id).order_by(CakeOrder.id.desc())
    )
    return list(result.scalars().all())


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> CakeOrder:
    order = await get_order_or_404(db, order_id)
    ensure_self_or_admin(claims, order.user_id)
    return order


@router.post("", response_model=OrderRead, status_code=201)
async def create_order(
    body: OrderCreate,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> CakeOrder:
    ensure_self_or_admin(claims, body.user_id, "place orders for")

    owner = await db.execute(select(User.id).where(User.id == body.user_id))
    if owner.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="User not found")
    await _ensure_design_exists(db, body.design_id)

    order = CakeOrder(**body.model_dump())
    db.add(order)
    await db.commit()
    await db.refresh(order)
    logger.info("Created order %d for user %d", order.id, order.user_id)
    return order


@router.patch("/{order_id}", response_model=OrderRead)
async def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> CakeOrder:
    if not body.status:
        raise HTTPException(status_code=400, detail="Status field is required")

    order = await get_order_or_404(db, order_id)
    order.status = body.status
    await db.commit()
    await db.refresh(order)
    logger.info("Order %d moved to %s", order_id, body.status)
    return order


@router.patch("/{order_id}/details", response_model=OrderRead)
async def update_order_details(
    order_id: int,
    body: OrderDetailsUpdate,
    db: AsyncSession = Depends(get_db),
    claims: TokenPayload = Depends(get_current_claims),
) -> CakeOrder:
    order = await get_order_or_404(db, order_id)
    ensure_self_or_admin(claims, order.user_id, "update")

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "design_id" in changes:
        await _ensure_design_exists(db, changes["design_id"])
    for field, value in changes.items():
        setattr(order, field, value)

    await db.commit()
    await db.refresh(order)
    logger.info("Updated details of order %d", order_id)
    return order


@router.delete("/{order_id}", response_model=DeleteResponse)
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> DeleteResponse:
    """Delete an order together with its production stages and deliveries."""
    order = await get_order_or_404(db, order_id)

    await db.execute(delete(CakeStage).where(CakeStage.order_id == order_id))
    await db.execute(delete(Delivery).where(Delivery.order_id == order_id))
    await db.delete(order)
    await db.commit()
    logger.info("Deleted order %d", order_id)
    return DeleteResponse(success=True, message="Order deleted successfully")
