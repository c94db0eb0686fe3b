"""
CakeApp: application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `repositories/`, `models/` and `core/`
packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from cakeapp.api.v1.api import api_router
from cakeapp.api.v1.endpoints.users import limiter
from cakeapp.core.config import settings
from cakeapp.core.exceptions import register_exception_handlers
from cakeapp.core.security import get_password_hash
from cakeapp.db.base import Base
from cakeapp.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from cakeapp.models.cake import CakeDesign, CakeOrder, CakeStage  # noqa: F401
from cakeapp.models.delivery import Delivery  # noqa: F401
from cakeapp.models.user import User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    # Seed default admin user on first run
    admin_email = settings.FIRST_ADMIN_EMAIL.strip().lower()
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == admin_email))
        if result.scalar_one_or_none() is None:
            admin = User(
                name=settings.FIRST_ADMIN_NAME,
                email=admin_email,
                hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                phone=settings.FIRST_ADMIN_PHONE,
                role="admin",
                is_verified=True,
            )
            session.add(admin)
            await session.commit()
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                admin_email,
            )

    logger.info("🎂 %s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Cake orders, designs, deliveries & user accounts",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Rate limiting (slowapi looks the limiter up on app.state)
    application.state.limiter = limiter

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @application.get("/", tags=["health"])
    async def root() -> dict:
        return {
            "status": "success",
            "message": "Cake API is running!",
            "routes": [
                f"{settings.API_V1_PREFIX}/{name}"
                for name in ("users", "designs", "orders", "stages", "deliveries")
            ],
        }

    return application


app = create_app()
