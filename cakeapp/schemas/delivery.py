"""Pydantic schemas for deliveries."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

DELIVERY_STATUSES = {"Scheduled", "Dispatched", "Delivered", "Failed"}


class DeliveryCreate(BaseModel):
    order_id: int
    delivery_address: str
    delivery_date: date
    courier_name: str | None = None
    courier_contact: str | None = None
    status: str = "Scheduled"

    @field_validator("delivery_address")
    @classmethod
    def _address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Delivery address must not be empty")
        return v

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        if v not in DELIVERY_STATUSES:
            raise ValueError(f"Status must be one of: {sorted(DELIVERY_STATUSES)}")
        return v


class DeliveryUpdate(BaseModel):
    delivery_address: str | None = None
    delivery_date: date | None = None
    courier_name: str | None = None
    courier_contact: str | None = None
    status: str | None = None

    @field_validator("delivery_address")
    @classmethod
    def _address(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Delivery address must not be empty")
        return v

    @field_validator("status")
    @classmethod
    def _status(cls, v: str | None) -> str | None:
        if v is not None and v not in DELIVERY_STATUSES:
            raise ValueError(f"Status must be one of: {sorted(DELIVERY_STATUSES)}")
        return v


class DeliveryRead(BaseModel):
    id: int
    order_id: int
    delivery_address: str
    delivery_date: date
    courier_name: str | None
    courier_contact: str | None
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
