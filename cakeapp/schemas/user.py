"""Pydantic schemas for the user identity lifecycle."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from cakeapp.models.user import ROLES


def _check_role(v: str | None) -> str | None:
    if v is not None and v not in ROLES:
        raise ValueError(f"Role must be one of: {set(ROLES)}")
    return v


# Required fields are checked by the identity service so that a missing
# value is reported as a 400 with a readable message.
class UserCreate(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    address: str | None = None
    role: str = "customer"

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str) -> str:
        return _check_role(v)  # type: ignore[return-value]


class VerifyRequest(BaseModel):
    email: str | None = None
    verification_code: int | None = None


class ResendVerificationRequest(BaseModel):
    email: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    address: str | None = None
    role: str
    is_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    address: str | None = None
    role: str | None = None

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        return _check_role(v)

    @field_validator("name", "email", "password", "phone")
    @classmethod
    def _not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("must not be empty")
        return v


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead


class UserUpdateResponse(BaseModel):
    message: str
    user: UserRead
