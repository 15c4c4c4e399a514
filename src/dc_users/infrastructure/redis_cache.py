"""Redis-backed CacheProtocol implementation.

The client is created with decode_responses=True, so GET returns str.
"""

import redis.asyncio as aioredis


class RedisCache:
    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        # DEL on a missing key returns 0, not an error
        await self._client.delete(key)
