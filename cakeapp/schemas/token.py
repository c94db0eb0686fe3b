"""Pydantic schemas for JWT session claims."""

from __future__ import annotations

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """Claims carried by an access token: who the caller is and their role."""

    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
