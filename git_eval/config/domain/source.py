"""Source-hosting configuration models."""

from pydantic import BaseModel, Field


class SourceConfig(BaseModel, frozen=True):
    api_url: str = Field(default="https://api.github.com", min_length=1)
    clone_base_url: str = Field(default="https://github.com", min_length=1)
    token: str | None = None
    user_agent: str = Field(default="git-eval", min_length=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0.0)


class LimitsConfig(BaseModel, frozen=True):
    max_repo_size_mb: int = Field(default=1024, ge=1)
    max_files: int = Field(default=10000, ge=1)
    clone_timeout_seconds: float = Field(default=120.0, gt=0.0)
