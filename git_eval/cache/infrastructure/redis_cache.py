"""RedisHotCache — HotCache backed by redis.asyncio."""

import redis.asyncio as aioredis


class RedisHotCache:
    """Satisfies the HotCache protocol using SETEX / GET / DEL.

    Errors are raised to the caller; the CacheCoordinator decides that hot
    cache failures are never fatal.
    """

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisHotCache":
        return cls(client=aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.setex(key, ttl_seconds, value)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def close(self) -> None:
        await self._client.aclose()
