"""
Authentication API endpoints.

Login issues a bearer token together with the dashboard pages the user's
role may open; logout blacklists that token in Redis.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fleetflow.app.db.session import get_db
from fleetflow.app.models.user import User
from fleetflow.app.models.enums import UserRole
from fleetflow.app.schemas.auth import (
    UserLogin, TokenResponse, CurrentUserResponse, PageAccessResponse, MessageResponse
)
from fleetflow.app.core.security import verify_password
from fleetflow.app.core.jwt import create_access_token, seconds_until_expiry, token_lifetime
from fleetflow.app.core.dependencies import get_current_user
from fleetflow.app.core.guards import allowed_pages_for, is_page_allowed
from fleetflow.app.core.token_revocation import revoke_token
from fleetflow.app.services.audit import log_auth_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange email and password for a bearer token.

    Emails are matched case-insensitively. Unknown emails and wrong passwords
    get the same 401 so account existence is not revealed; the audit entry records
    which one it was.
    """
    email = credentials.email.strip().lower()
    ip_address = _client_ip(request)

    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()

    failure = None
    if user is None:
        failure = "User not found"
    elif not verify_password(credentials.password, user.hashed_password):
        failure = "Invalid password"

    if failure:
        await log_auth_event(db, AuditAction.LOGIN_FAILED, user.id if user else None, email,
                             ip_address, {"reason": failure})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        await log_auth_event(db, AuditAction.LOGIN_FAILED, user.id, email,
                             ip_address, {"reason": "Account is inactive"})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user account")

    token = create_access_token(user.id, user.email, user.role.value)
    await log_auth_event(db, AuditAction.LOGIN_SUCCESS, user.id, email,
                         ip_address, {"role": user.role.value})

    return TokenResponse(
        access_token=token,
        expires_in=int(token_lifetime().total_seconds()),
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        role_label=user.role.label,
        allowed_pages=allowed_pages_for(user.role),
    )


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Profile of the caller plus the dashboard pages the role unlocks."""
    user = (await db.execute(select(User).where(User.id == current_user["user_id"]))).scalar_one()

    profile = CurrentUserResponse.model_validate({
        **{field: getattr(user, field) for field in ("id", "email", "name", "role", "is_active",
                                                      "created_at", "updated_at")},
        "role_label": user.role.label,
        "allowed_pages": allowed_pages_for(user.role),
    })
    return profile


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Blacklist the presented token for the rest of its lifetime.

    Answers 503 when Redis is unreachable: the client should not believe it
    is logged out while the token still works.
    """
    revoked = await revoke_token(
        current_user["token"],
        current_user["user_id"],
        seconds_until_expiry(current_user),
    )
    if not revoked:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token revocation is unavailable"
        )

    await log_auth_event(db, AuditAction.LOGOUT, current_user["user_id"], current_user.get("sub"),
                         _client_ip(request))
    return MessageResponse(message="Logged out")


@router.get("/access", response_model=PageAccessResponse)
async def check_page_access(
    page: str = Query(..., min_length=1, description="Dashboard path, e.g. /dashboard/trips"),
    current_user: dict = Depends(get_current_user)
):
    """Route guard for the dashboard: may this role open ``page``?"""
    role = UserRole(current_user["role"])
    return PageAccessResponse(page=page, role=role, allowed=is_page_allowed(role, page))
