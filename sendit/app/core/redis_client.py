"""
Redis client initialization and connection management.

This module provides the Redis client used for token revocation.
"""

import logging

import redis.asyncio as redis
from sendit.app.core.config import settings

logger = logging.getLogger(__name__)


# Create async Redis client (connections are opened lazily by redis-py)
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def ping_redis() -> bool:
    """
    Test Redis connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        return await redis_client.ping()
    except Exception as e:
        logger.warning("Redis ping failed: %s", e)
        return False


async def close_redis() -> None:
    await redis_client.aclose()
