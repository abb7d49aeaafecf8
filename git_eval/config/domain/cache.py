"""Hot cache configuration model."""

from pydantic import BaseModel, Field

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class CacheConfig(BaseModel, frozen=True):
    redis_url: str | None = None
    ttl_seconds: int = Field(default=DEFAULT_TTL_SECONDS, ge=1)
