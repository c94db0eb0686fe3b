"""
FastAPI dependencies: database session, auth guards, service wiring.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cakeapp.core.config import settings
from cakeapp.core.exceptions import ForbiddenError
from cakeapp.core.mailer import Mailer
from cakeapp.core.security import TokenIssuer
from cakeapp.db.session import async_session_factory
from cakeapp.repositories.user_repository import UserRepository
from cakeapp.schemas.token import TokenPayload
from cakeapp.services.identity import IdentityService

# We use auto_error=False so we can manually check for the cookie if header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/users/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Collaborators ───────────────────────────────────────────────────
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


def get_mailer() -> Mailer:
    return Mailer.from_settings(settings)


def get_identity_service(
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> IdentityService:
    return IdentityService(UserRepository(db), mailer, tokens)


# ── Auth dependencies ───────────────────────────────────────────────
def _extract_token(header_token: str | None, cookie_token: str | None) -> str | None:
    # Priority: Header > Cookie
    if header_token:
        return header_token
    if cookie_token:
        # Cookie is set as "Bearer <token>"
        if cookie_token.startswith("Bearer "):
            return cookie_token.split(" ", 1)[1]
        return cookie_token
    return None


async def get_optional_claims(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # Read from HttpOnly Cookie
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> TokenPayload | None:
    """Decode the caller's JWT if one was sent; anonymous callers get ``None``."""
    final_token = _extract_token(token, access_token)
    if not final_token:
        return None
    payload = tokens.decode(final_token)
    if payload is None:
        return None
    try:
        return TokenPayload.model_validate(payload)
    except ValueError:
        return None


async def get_current_claims(
    claims: TokenPayload | None = Depends(get_optional_claims),
) -> TokenPayload:
    """Require a valid bearer token (header or cookie)."""
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


async def require_admin(
    claims: TokenPayload = Depends(get_current_claims),
) -> TokenPayload:
    """Only allow admin role to proceed."""
    if not claims.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return claims


def ensure_self_or_admin(claims: TokenPayload, user_id: int, action: str = "access") -> None:
    """Non-admins may only touch records that belong to their own id."""
    if not claims.is_admin and claims.id != user_id:
        raise ForbiddenError(f"Forbidden: Cannot {action} other user's data")
