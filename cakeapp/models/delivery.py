"""
Delivery model: courier scheduling for finished orders.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String

from cakeapp.db.base import Base


class Delivery(Base):
    __tablename__ = "deliveries"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    order_id: int = Column(Integer, ForeignKey("cake_orders.id"), nullable=False, index=True)  # type: ignore[assignment]
    delivery_address: str = Column(String(500), nullable=False)  # type: ignore[assignment]
    delivery_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    courier_name: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    courier_contact: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(30), nullable=False, default="Scheduled", server_default="Scheduled")  # type: ignore[assignment]
    # Scheduled | Dispatched | Delivered | Failed
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
