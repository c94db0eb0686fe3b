"""
JWT token issuing / decoding and password hashing (bcrypt).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from cakeapp.core.config import Settings
from cakeapp.core.exceptions import ConfigError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
class TokenIssuer:
    """Signs and decodes stateless access tokens.

    The secret is handed in at construction so nothing below the
    dependency layer reads configuration on its own.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(hours=1),
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(
            settings.SECRET_KEY,
            settings.ALGORITHM,
            timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    @property
    def expires_in(self) -> int:
        return int(self._expires_delta.total_seconds())

    def issue(self, user_id: int, email: str, role: str) -> str:
        if not self._secret:
            raise ConfigError("JWT secret not defined.")
        expire = datetime.now(timezone.utc) + self._expires_delta
        claims: dict[str, Any] = {
            "sub": str(user_id),
            "id": user_id,
            "email": email,
            "role": role,
            "type": "access",
            "exp": expire,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict | None:
        """Return payload dict if *access* token is valid, else ``None``."""
        if not self._secret:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            return None
        if payload.get("type") != "access":
            return None
        return payload
