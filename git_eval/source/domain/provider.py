"""Source-hosting collaborator Protocols."""

from pathlib import Path
from typing import Protocol

from git_eval.source.domain.metadata import (
    FetchedContent,
    RepositoryMetadata,
    RepositoryRef,
)


class VersionResolver(Protocol):
    async def resolve_version(self, owner: str, name: str) -> str:
        """Return the current commit identifier of the default branch.

        Raises:
            RepositoryNotFoundError, RepositoryInaccessibleError,
            RateLimitedError, UpstreamError.
        """
        ...


class MetadataProvider(Protocol):
    async def get_metadata(self, owner: str, name: str) -> RepositoryMetadata: ...

    async def list_user_repositories(self, username: str) -> list[RepositoryRef]: ...


class ContentProvider(Protocol):
    async def fetch(
        self,
        owner: str,
        name: str,
        version: str,
        size_kb: int,
        destination: Path,
    ) -> FetchedContent:
        """Retrieve the repository at *version* into *destination*.

        Raises:
            RepositoryTooLargeError, TooManyFilesError,
            CollaboratorTimeoutError, UpstreamError.
        """
        ...
