"""Redis client factory: backs the user list snapshot cache.

The client owns a connection pool; it is created once by the application
lifespan and shared by every request through ``app.state``.
"""

import redis.asyncio as aioredis

from config.settings import Settings


def create_redis(settings: Settings) -> aioredis.Redis:
    """Create a Redis client with its own connection pool."""
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=settings.CACHE_TIMEOUT_SECONDS,
        socket_timeout=settings.CACHE_TIMEOUT_SECONDS,
    )


async def close_redis(client: aioredis.Redis) -> None:
    """Close the client and release its connection pool."""
    await client.aclose()
