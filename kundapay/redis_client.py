"""
Redis connection setup using redis-py async client.

Provides the shared redis instance backing the rate/fee lookup cache.
TLS is selected through the ``rediss://`` scheme.
"""

import redis.asyncio as aioredis

from kundapay.config import settings


def _redis_url() -> str:
    url = settings.REDIS_URL
    if settings.REDIS_SSL and url.startswith("redis://"):
        url = "rediss://" + url[len("redis://"):]
    return url


redis = aioredis.from_url(_redis_url(), decode_responses=True)


async def get_redis() -> aioredis.Redis:
    """FastAPI dependency that provides the Redis client."""
    return redis
