"""
User endpoints: registration, email verification, login & profile CRUD.

- register / verify / resend-verification / login are public.
- GET /users requires admin.
- GET / PUT / DELETE /users/{id} require a token; non-admins may only
  target their own id.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from cakeapp.api.v1.deps import (ensure_self_or_admin, get_current_claims,
                                 get_identity_service, get_optional_claims,
                                 require_admin)
from cakeapp.core.config import settings
from cakeapp.core.exceptions import (ForbiddenError, NotFoundError,
                                     ValidationError)
from cakeapp.models.user import User
from cakeapp.schemas.token import TokenPayload
from cakeapp.schemas.user import (LoginRequest, LoginResponse, MessageResponse,
                                  ResendVerificationRequest, UserCreate,
                                  UserRead, UserUpdate, UserUpdateResponse,
                                  VerifyRequest)
from cakeapp.services.identity import IdentityService

# Rate limiter: keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/users", tags=["users"])


# ── Registration & verification ─────────────────────────────────────
@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserCreate,
    service: IdentityService = Depends(get_identity_service),
    caller: TokenPayload | None = Depends(get_optional_claims),
) -> MessageResponse:
    """Create an unverified account and email it a verification code."""
    if body.role == "admin" and (caller is None or not caller.is_admin):
        raise ForbiddenError("Only an admin can create admin accounts")
    return await service.register(body)


@router.post("/verify", response_model=MessageResponse)
async def verify(
    body: VerifyRequest,
    service: IdentityService = Depends(get_identity_service),
) -> MessageResponse:
    return await service.verify(body.email, body.verification_code)


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    body: ResendVerificationRequest,
    service: IdentityService = Depends(get_identity_service),
) -> MessageResponse:
    """Issue a fresh code. An unknown email is reported as a plain 400."""
    try:
        return await service.resend_verification_code(body.email)
    except NotFoundError as exc:
        raise ValidationError(exc.detail) from exc


# ── Session ─────────────────────────────────────────────────────────
@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
) -> LoginResponse:
    """Authenticate with email/password. Also sets an HttpOnly cookie."""
    result = await service.login(body.email, body.password)

    response.set_cookie(
        key="access_token",
        value=f"Bearer {result.token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,  # Set to True in HTTPS production
        samesite="lax",
        max_age=result.expires_in,
    )
    return result


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the auth cookie. Tokens are stateless, so nothing else to revoke."""
    response.delete_cookie("access_token")
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserRead)
async def read_current_user(
    claims: TokenPayload = Depends(get_current_claims),
    service: IdentityService = Depends(get_identity_service),
) -> User:
    return await service.get_by_id(claims.id)


# ── Profile CRUD ────────────────────────────────────────────────────
@router.get("", response_model=list[UserRead])
async def list_users(
    service: IdentityService = Depends(get_identity_service),
    _admin: TokenPayload = Depends(require_admin),
) -> list[User]:
    return await service.list_users()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    service: IdentityService = Depends(get_identity_service),
    claims: TokenPayload = Depends(get_current_claims),
) -> User:
    ensure_self_or_admin(claims, user_id, "access")
    return await service.get_by_id(user_id)


@router.put("/{user_id}", response_model=UserUpdateResponse)
async def update_user(
    user_id: int,
    body: UserUpdate,
    service: IdentityService = Depends(get_identity_service),
    claims: TokenPayload = Depends(get_current_claims),
) -> UserUpdateResponse:
    ensure_self_or_admin(claims, user_id, "update")
    if body.role is not None and not claims.is_admin:
        raise ForbiddenError("Only an admin can change roles")
    user = await service.update(user_id, body)
    return UserUpdateResponse(message="User updated successfully", user=UserRead.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    service: IdentityService = Depends(get_identity_service),
    claims: TokenPayload = Depends(get_current_claims),
) -> MessageResponse:
    ensure_self_or_admin(claims, user_id, "delete")
    return await service.delete(user_id)
