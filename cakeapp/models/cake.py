"""
Cake designs, customer orders & production stages: core business domain.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (JSON, Boolean, Column, Date, DateTime, ForeignKey,
                        Integer, String, Text)

from cakeapp.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CakeDesign(Base):
    __tablename__ = "cake_designs"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    design_name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    base_flavor: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    size: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    image_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    category: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    availability: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class CakeOrder(Base):
    __tablename__ = "cake_orders"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    design_id: int | None = Column(Integer, ForeignKey("cake_designs.id"), nullable=True)  # type: ignore[assignment]
    size: str = Column(String(50), nullable=False)  # type: ignore[assignment]
    flavor: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    message: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(30), nullable=False, default="Pending", server_default="Pending")  # type: ignore[assignment]
    # Pending | Confirmed | In Progress | Ready | Delivered | Cancelled
    delivery_date: date | None = Column(Date, nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    extended_description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    sample_images: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    color_preferences: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)  # type: ignore[assignment]


class CakeStage(Base):
    __tablename__ = "cake_stages"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    order_id: int = Column(Integer, ForeignKey("cake_orders.id"), nullable=False, index=True)  # type: ignore[assignment]
    stage_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    # e.g. Baking | Decorating | Packaging
    status: str = Column(String(30), nullable=False, default="Pending", server_default="Pending")  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    started_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    completed_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
