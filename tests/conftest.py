"""
Shared test fixtures for the CakeApp test suite.

Each test gets its own SQLite database file (aiosqlite) and a recording
mailer, both wired into the app through dependency overrides.
"""

import os
import re
from typing import AsyncGenerator

import pytest

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"
# CORS fix (JSON format)
os.environ["CORS_ORIGINS"] = '["*"]'

from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from cakeapp.api.v1.deps import get_db, get_mailer
from cakeapp.core.config import settings
from cakeapp.core.exceptions import MailerError
from cakeapp.core.security import TokenIssuer, get_password_hash
from cakeapp.db.base import Base
from cakeapp.main import app
from cakeapp.models.user import User

_CODE_RE = re.compile(r"<strong>(\d{6})</strong>")


class FakeMailer:
    """Records every outgoing email instead of talking to SMTP."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise MailerError("SMTP is down")
        self.sent.append((to_email, subject, html_body))

    def last_code(self, to_email: str) -> int:
        for recipient, _subject, body in reversed(self.sent):
            match = _CODE_RE.search(body)
            if recipient == to_email and match:
                return int(match.group(1))
        raise AssertionError(f"No verification code was emailed to {to_email}")


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh database per test, tables created up front."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory, mailer) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Helpers ─────────────────────────────────────────────────────────
async def create_user(
    db: AsyncSession,
    email: str = "bob@example.com",
    password: str = "secret123",
    role: str = "customer",
    is_verified: bool = True,
    name: str = "Bob",
    phone: str = "0711111111",
) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        phone=phone,
        role=role,
        is_verified=is_verified,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def fetch_user(db: AsyncSession, email: str) -> User | None:
    """Re-read a user from the database, bypassing the session identity map."""
    result = await db.execute(
        select(User).where(User.email == email).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def auth_headers(issuer: TokenIssuer, user: User) -> dict[str, str]:
    token = issuer.issue(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin(db_session) -> User:
    return await create_user(db_session, email="admin@example.com", role="admin", name="Admin")


@pytest.fixture
async def customer(db_session) -> User:
    return await create_user(db_session, email="carol@example.com", name="Carol")


@pytest.fixture
def admin_headers(token_issuer, admin) -> dict[str, str]:
    return auth_headers(token_issuer, admin)


@pytest.fixture
def customer_headers(token_issuer, customer) -> dict[str, str]:
    return auth_headers(token_issuer, customer)
