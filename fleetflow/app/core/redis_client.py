"""
Shared async Redis connection.

FleetFlow keeps only revoked access tokens in Redis. Callers look the client
up as ``redis_client.redis_client`` at call time so tests can swap it.
"""

import logging
import redis.asyncio as redis
from fleetflow.app.core.config import settings

logger = logging.getLogger("fleetflow")

redis_client = redis.from_url(settings.redis_url, decode_responses=True)


async def ping_redis() -> bool:
    try:
        return bool(await redis_client.ping())
    except Exception as e:
        logger.warning("Token store unreachable at %s: %s", settings.redis_url.split("@")[-1], e)
        return False
