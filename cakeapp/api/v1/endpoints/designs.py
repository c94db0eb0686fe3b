"""
Cake design catalogue endpoints.

- GET operations are public (the storefront lists designs).
- POST / PUT / DELETE operations require admin role.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cakeapp.api.v1.deps import get_db, require_admin
from cakeapp.models.cake import CakeDesign
from cakeapp.schemas.cake import (DeleteResponse, DesignCreate, DesignRead,
                                  DesignUpdate)
from cakeapp.schemas.token import TokenPayload

router = APIRouter(prefix="/designs", tags=["designs"])
logger = logging.getLogger(__name__)


async def _get_design_or_404(db: AsyncSession, design_id: int) -> CakeDesign:
    result = await db.execute(select(CakeDesign).where(CakeDesign.id == design_id))
    design = result.scalar_one_or_none()
    if design is None:
        raise HTTPException(status_code=404, detail="Design not found")
    return design


@router.get("", response_model=list[DesignRead])
async def list_designs(
    category: str | None = None,
    available_only: bool = False,
    skip: int = 0,
    limit: int = Query(default=100, le=500),
    db: AsyncSession = Depends(get_db),
) -> list[CakeDesign]:
    query = select(CakeDesign).order_by(CakeDesign.id).offset(skip).limit(limit)
    if category:
        query = query.where(CakeDesign.category == category)
    if available_only:
        query = query.where(CakeDesign.availability.is_(True))
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{design_id}", response_model=DesignRead)
async def get_design(
    design_id: int,
    db: AsyncSession = Depends(get_db),
) -> CakeDesign:
    return await _get_design_or_404(db, design_id)


@router.post("", response_model=DesignRead, status_code=201)
async def create_design(
    body: DesignCreate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> CakeDesign:
    design = CakeDesign(**body.model_dump())
    db.add(design)
    await db.commit()
    await db.refresh(design)
    logger.info("Created design %d (%s)", design.id, design.design_name)
    return design


@router.put("/{design_id}", response_model=DesignRead)
async def update_design(
    design_id: int,
    body: DesignUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> CakeDesign:
    design = await _get_design_or_404(db, design_id)

    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(design, field, value)

    await db.commit()
    await db.refresh(design)
    logger.info("Updated design %d", design_id)
    return design


@router.delete("/{design_id}", response_model=DeleteResponse)
async def delete_design(
    design_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
) -> DeleteResponse:
    design = await _get_design_or_404(db, design_id)
    await db.delete(design)
    await db.commit()
    logger.info("Deleted design %d", design_id)
    return DeleteResponse(success=True, message="Design deleted successfully")
