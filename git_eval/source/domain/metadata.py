"""Repository metadata and fetched-content value objects."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field


class Contributor(BaseModel, frozen=True):
    username: str
    contributions: int = Field(ge=0)
    avatar_url: str | None = None


class RepositoryMetadata(BaseModel, frozen=True):
    """Descriptive facts about a repository as reported by the source host."""

    languages: list[str] = Field(default_factory=list)
    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    watchers: int = Field(default=0, ge=0)
    open_issues: int = Field(default=0, ge=0)
    last_updated: datetime | None = None
    license: str | None = None
    contributors: list[Contributor] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    description: str | None = None
    default_branch: str = "main"
    size_kb: int = Field(default=0, ge=0)


class RepositoryRef(BaseModel, frozen=True):
    owner: str = Field(min_length=1)
    name: str = Field(min_length=1)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


class FetchedContent(BaseModel, frozen=True):
    """Result of retrieving a repository into a local scratch directory."""

    path: Path
    version: str = Field(min_length=1)
    file_count: int = Field(ge=0)
    size_mb: float = Field(ge=0.0)
