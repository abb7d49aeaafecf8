"""HotCache Protocol — fast, expiring key/value store keyed by CacheKey.as_string()."""

from typing import Protocol


class HotCache(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...
