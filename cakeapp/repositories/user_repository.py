"""
Credential store: async SQLAlchemy access to the ``users`` table.

Emails are expected to arrive already normalised; the repository does no
business validation of its own.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cakeapp.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> User:
        """Insert a user; re-raises ``IntegrityError`` after rolling back."""
        user = User(**fields)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user

    async def update(self, user: User, fields: dict[str, Any]) -> User:
        for field, value in fields.items():
            setattr(user, field, value)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user

    async def set_verification_code(self, user: User, code: int) -> User:
        return await self.update(user, {"verification_code": code})

    async def mark_verified(self, user: User) -> User:
        return await self.update(user, {"is_verified": True, "verification_code": None})

    async def delete(self, user: User) -> None:
        """Delete a user; re-raises ``IntegrityError`` (rows still reference them)."""
        await self.db.delete(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
