"""
Signing and verification of FleetFlow access tokens (HS256 via python-jose).

Claims carried by every token::

    {"sub": "dispatcher@fleetflow.com", "user_id": 2, "role": "DISPATCHER", "exp": ...}
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fleetflow.app.core.config import settings


def token_lifetime() -> timedelta:
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(user_id: int, email: str, role: str, lifetime: Optional[timedelta] = None) -> str:
    expires_at = datetime.now(timezone.utc) + (lifetime or token_lifetime())
    claims = {"sub": email, "user_id": user_id, "role": role, "exp": expires_at}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verified claims, or None for a bad signature, malformed token or expired token."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def seconds_until_expiry(claims: Dict[str, Any]) -> int:
    """How long a revoked token must stay blacklisted; at least one second."""
    exp = claims.get("exp")
    if exp is None:
        return int(token_lifetime().total_seconds())
    return max(int(exp - datetime.now(timezone.utc).timestamp()), 1)
