"""
Logout support: a Redis blacklist of revoked access tokens.

Each entry lives exactly as long as the token it blocks, so the blacklist
never outgrows the set of tokens that could still verify.
"""

import logging
from fleetflow.app.core import redis_client as redis_module

logger = logging.getLogger("fleetflow")

REVOKED_TOKEN_PREFIX = "fleetflow:revoked:"


def _key(token: str) -> str:
    return f"{REVOKED_TOKEN_PREFIX}{token}"


async def revoke_token(token: str, user_id: int, ttl_seconds: int) -> bool:
    """Blacklist ``token`` for ``ttl_seconds``. False when Redis could not be written."""
    try:
        await redis_module.redis_client.setex(_key(token), ttl_seconds, str(user_id))
    except Exception as e:
        logger.error("Could not revoke token for user %s: %s", user_id, e)
        return False
    return True


async def is_token_revoked(token: str) -> bool:
    # Fails open: with Redis down, tokens remain valid until they expire
    try:
        return await redis_module.redis_client.exists(_key(token)) > 0
    except Exception as e:
        logger.warning("Revocation check skipped, token store unavailable: %s", e)
        return False
