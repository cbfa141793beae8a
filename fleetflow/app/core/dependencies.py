"""
Bearer-token authentication for protected routes.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fleetflow.app.core.jwt import decode_access_token
from fleetflow.app.core.token_revocation import is_token_revoked
from fleetflow.app.db.session import get_db
from fleetflow.app.models.user import User

# auto_error=False so a missing header is a 401 in our envelope, not a bare 403
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Resolve the caller from the Authorization header.

    The token must verify, must not be on the logout blacklist, and its user
    must still exist and be active; role changes take effect on the next
    login since the role is read from the token.

    Returns the token claims (``sub``, ``user_id``, ``role``) with the raw
    token added under ``token`` so logout can revoke it.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    token = credentials.credentials
    claims = decode_access_token(token)
    if claims is None:
        raise _unauthorized("Could not validate credentials")
    if not claims.get("user_id") or not claims.get("role"):
        raise _unauthorized("Invalid token payload")

    if await is_token_revoked(token):
        raise _unauthorized("Token has been revoked")

    user = (await db.execute(select(User).where(User.id == claims["user_id"]))).scalar_one_or_none()
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    return {**claims, "token": token}
