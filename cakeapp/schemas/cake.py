"""Pydantic schemas for cake designs, orders and production stages."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

ORDER_STATUSES = {"Pending", "Confirmed", "In Progress", "Ready", "Delivered", "Cancelled"}
STAGE_STATUSES = {"Pending", "In Progress", "Completed"}


def _check_status(v: str | None, allowed: set[str]) -> str | None:
    if v is not None and v not in allowed:
        raise ValueError(f"Status must be one of: {sorted(allowed)}")
    return v


class DeleteResponse(BaseModel):
    success: bool
    message: str


# ── Design ──────────────────────────────────────────────────────────
class DesignCreate(BaseModel):
    design_name: str
    description: str | None = None
    base_flavor: str | None = None
    size: str | None = None
    image_url: str | None = None
    category: str | None = None
    availability: bool = True

    @field_validator("design_name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Design name must not be empty")
        return v


class DesignUpdate(BaseModel):
    design_name: str | None = None
    description: str | None = None
    base_flavor: str | None = None
    size: str | None = None
    image_url: str | None = None
    category: str | None = None
    availability: bool | None = None

    @field_validator("design_name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Design name must not be empty")
        return v


class DesignRead(BaseModel):
    id: int
    design_name: str
    description: str | None
    base_flavor: str | None
    size: str | None
    image_url: str | None
    category: str | None
    availability: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Order ───────────────────────────────────────────────────────────
class OrderCreate(BaseModel):
    user_id: int
    design_id: int | None = None
    size: str
    flavor: str
    message: str | None = None
    status: str = "Pending"
    delivery_date: date | None = None
    notes: str | None = None
    extended_description: str | None = None
    sample_images: list[str] = []
    color_preferences: list[str] = []

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        return _check_status(v, ORDER_STATUSES)  # type: ignore[return-value]


class OrderDetailsUpdate(BaseModel):
    design_id: int | None = None
    size: str | None = None
    flavor: str | None = None
    message: str | None = None
    delivery_date: date | None = None
    notes: str | None = None
    extended_description: str | None = None
    sample_images: list[str] | None = None
    color_preferences: list[str] | None = None


class OrderStatusUpdate(BaseModel):
    status: str | None = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: str | None) -> str | None:
        return _check_status(v, ORDER_STATUSES)


class OrderRead(BaseModel):
    id: int
    user_id: int
    design_id: int | None
    size: str
    flavor: str
    message: str | None
    status: str
    delivery_date: date | None
    notes: str | None
    extended_description: str | None
    sample_images: list[str]
    color_preferences: list[str]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


# ── Stage ───────────────────────────────────────────────────────────
class StageCreate(BaseModel):
    order_id: int
    stage_name: str
    status: str = "Pending"
    notes: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        return _check_status(v, STAGE_STATUSES)  # type: ignore[return-value]


class StageUpdate(BaseModel):
    stage_name: str | None = None
    status: str | None = None
    notes: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @field_validator("stage_name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Stage name must not be empty")
        return v

    @field_validator("status")
    @classmethod
    def _status(cls, v: str | None) -> str | None:
        return _check_status(v, STAGE_STATUSES)


class StageRead(BaseModel):
    id: int
    order_id: int
    stage_name: str
    status: str
    notes: str | None
    started_at: datetime | None
    completed_at: datetime | None

    model_config = {"from_attributes": True}
