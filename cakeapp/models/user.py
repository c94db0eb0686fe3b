"""
User model: identity, email verification & role-based access control.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from cakeapp.db.base import Base

ROLES = ("customer", "admin")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    phone: str = Column(String(30), nullable=False)  # type: ignore[assignment]
    address: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    role: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="customer",
        server_default="customer",
    )  # customer | admin
    is_verified: bool = Column(  # type: ignore[assignment]
        Boolean, nullable=False, default=False, server_default="false"
    )
    # Set only while a verification cycle is pending
    verification_code: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )
