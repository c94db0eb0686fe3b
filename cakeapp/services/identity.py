"""
Identity service: registration, email verification, login & profile
management.

Every failure is raised as one of the typed errors in
:mod:`cakeapp.core.exceptions`.  Emails are best-effort: a
:class:`MailerError` is logged and never undoes the operation that
triggered it.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError

from cakeapp.core.exceptions import (AuthError, ConflictError, InvalidCodeError,
                                     MailerError, NotFoundError,
                                     UnverifiedError, ValidationError)
from cakeapp.core.mailer import BRAND, Mailer, verification_email, verified_email
from cakeapp.core.security import TokenIssuer, get_password_hash, verify_password
from cakeapp.models.user import User
from cakeapp.repositories.user_repository import UserRepository
from cakeapp.schemas.user import (LoginResponse, MessageResponse, UserCreate,
                                  UserRead, UserUpdate)

logger = logging.getLogger(__name__)

CODE_MIN = 100_000
CODE_MAX = 999_999


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_verification_code() -> int:
    """Uniformly random 6-digit code in [100000, 999999]."""
    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)


class IdentityService:
    def __init__(self, users: UserRepository, mailer: Mailer, tokens: TokenIssuer) -> None:
        self.users = users
        self.mailer = mailer
        self.tokens = tokens

    # ── Helpers ─────────────────────────────────────────────────────
    async def _notify(self, to_email: str, subject: str, html_body: str) -> bool:
        """Send an email, reporting failure instead of raising it."""
        try:
            await self.mailer.send(to_email, subject, html_body)
        except MailerError as exc:
            logger.warning("Email '%s' to %s not delivered: %s", subject, to_email, exc)
            return False
        return True

    async def _get_by_email_or_404(self, email: str) -> User:
        user = await self.users.get_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("User not found.")
        return user

    # ── Registration & verification ─────────────────────────────────
    async def register(self, new_user: UserCreate) -> MessageResponse:
        name = (new_user.name or "").strip()
        phone = (new_user.phone or "").strip()
        if not name or not new_user.email or not new_user.password:
            raise ValidationError("Name, email, and password are required.")
        if not phone:
            raise ValidationError("Phone number is required.")

        email = normalize_email(new_user.email)
        if "@" not in email:
            raise ValidationError("Invalid email address")
        if await self.users.get_by_email(email) is not None:
            raise ConflictError("Email already exists")

        code = generate_verification_code()
        try:
            user = await self.users.create(
                name=name,
                email=email,
                hashed_password=await run_in_threadpool(get_password_hash, new_user.password),
                phone=phone,
                address=new_user.address,
                role=new_user.role,
                is_verified=False,
                verification_code=code,
            )
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("Email already exists") from exc
        logger.info("Registered user %d (%s)", user.id, user.email)

        sent = await self._notify(
            user.email,
            f"Verify your email - {BRAND}",
            verification_email(user.name, code),
        )
        if not sent:
            return MessageResponse(
                message="User created successfully, but verification email failed."
            )
        return MessageResponse(
            message=f"User created successfully. Verification code sent to {user.email}."
        )

    async def verify(self, email: str | None, code: int | None) -> MessageResponse:
        if not email or code is None:
            raise ValidationError("Email and verification code are required")

        user = await self._get_by_email_or_404(email)
        if user.verification_code is None or user.verification_code != code:
            raise InvalidCodeError("Invalid verification code")

        await self.users.mark_verified(user)
        logger.info("User %d verified", user.id)

        await self._notify(
            user.email,
            f"Your email has been verified - {BRAND}",
            verified_email(user.name),
        )
        return MessageResponse(message="User verified successfully.")

    async def resend_verification_code(self, email: str | None) -> MessageResponse:
        if not email:
            raise ValidationError("Email is required")

        user = await self._get_by_email_or_404(email)
        code = generate_verification_code()
        await self.users.set_verification_code(user, code)
        logger.info("Verification code reissued for user %d", user.id)

        sent = await self._notify(
            user.email,
            f"Resend verification code - {BRAND}",
            verification_email(user.name, code),
        )
        if not sent:
            return MessageResponse(
                message="Verification code regenerated, but email delivery failed."
            )
        return MessageResponse(message="Verification code resent successfully.")

    # ── Login ───────────────────────────────────────────────────────
    async def login(self, email: str | None, password: str | None) -> LoginResponse:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self._get_by_email_or_404(email)
        if not await run_in_threadpool(verify_password, password, user.hashed_password):
            raise AuthError("Invalid credentials.")
        if not user.is_verified:
            raise UnverifiedError("Please verify your email before logging in.")

        token = self.tokens.issue(user.id, user.email, user.role)
        logger.info("User %d logged in", user.id)
        return LoginResponse(
            message="Login successful.",
            token=token,
            expires_in=self.tokens.expires_in,
            user=UserRead.model_validate(user),
        )

    # ── Profile CRUD ────────────────────────────────────────────────
    async def list_users(self) -> list[User]:
        return await self.users.list_all()

    async def get_by_id(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def update(self, user_id: int, changes: UserUpdate) -> User:
        user = await self.get_by_id(user_id)

        fields: dict[str, Any] = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in fields:
            fields["hashed_password"] = await run_in_threadpool(
                get_password_hash, fields.pop("password")
            )
        if "email" in fields:
            fields["email"] = normalize_email(fields["email"])
            if fields["email"] != user.email:
                other = await self.users.get_by_email(fields["email"])
                if other is not None:
                    raise ConflictError("Email already exists")

        try:
            user = await self.users.update(user, fields)
        except IntegrityError as exc:
            raise ConflictError("Email already exists") from exc
        logger.info("Updated user %d (fields: %s)", user_id, sorted(fields))
        return user

    async def delete(self, user_id: int) -> MessageResponse:
        user = await self.get_by_id(user_id)
        try:
            await self.users.delete(user)
        except IntegrityError as exc:
            # cake_orders.user_id has no cascade
            raise ConflictError("User has orders") from exc
        logger.info("Deleted user %d", user_id)
        return MessageResponse(message="User deleted successfully")
