"""GitCloneProvider — ContentProvider that shallow-fetches a pinned commit with git."""

import asyncio
import os
from pathlib import Path

from git_eval.config.domain.source import LimitsConfig
from git_eval.core.errors import (
    CollaboratorTimeoutError,
    RepositoryTooLargeError,
    TooManyFilesError,
    UpstreamError,
)
from git_eval.source.domain.metadata import FetchedContent

_GIT_DIR = ".git"
_STDERR_TAIL = 500


class GitCloneProvider:
    """Retrieves exactly one commit of a repository into a scratch directory.

    Instead of ``git clone --depth 1`` (which follows the branch tip) the
    commit is fetched by sha, so the content always matches the version the
    run resolved even if the branch moves in between.

    Does NOT inherit from ContentProvider (structural typing via Protocol).
    """

    def __init__(
        self,
        limits: LimitsConfig,
        clone_base_url: str = "https://github.com",
        git_executable: str = "git",
    ) -> None:
        self._limits = limits
        self._clone_base_url = clone_base_url.rstrip("/")
        self._git = git_executable

    async def fetch(
        self,
        owner: str,
        name: str,
        version: str,
        size_kb: int,
        destination: Path,
    ) -> FetchedContent:
        size_mb = size_kb / 1024
        if size_mb > self._limits.max_repo_size_mb:
            raise RepositoryTooLargeError(
                size_mb=size_mb, limit_mb=self._limits.max_repo_size_mb
            )

        destination.mkdir(parents=True, exist_ok=True)
        remote = f"{self._clone_base_url}/{owner}/{name}.git"
        timeout = self._limits.clone_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                await self._git_run(destination, "init", "--quiet")
                await self._git_run(destination, "remote", "add", "origin", remote)
                await self._git_run(
                    destination, "fetch", "--quiet", "--depth", "1", "origin", version
                )
                await self._git_run(
                    destination, "checkout", "--quiet", "--detach", "FETCH_HEAD"
                )
        except TimeoutError as exc:
            raise CollaboratorTimeoutError(
                operation=f"clone {owner}/{name}", timeout_seconds=timeout
            ) from exc

        file_count = await asyncio.to_thread(_count_files, destination)
        if file_count > self._limits.max_files:
            raise TooManyFilesError(file_count=file_count, limit=self._limits.max_files)

        return FetchedContent(
            path=destination,
            version=version,
            file_count=file_count,
            size_mb=size_mb,
        )

    async def _git_run(self, repository: Path, command: str, *args: str) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                self._git,
                "-C",
                str(repository),
                command,
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except FileNotFoundError as exc:
            raise UpstreamError(
                service="git", reason=f"executable not found: {self._git}"
            ) from exc

        try:
            _, stderr = await process.communicate()
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip()[-_STDERR_TAIL:]
            raise UpstreamError(
                service="git",
                reason=f"git {command} exited {process.returncode}: {message}",
            )


def _count_files(root: Path) -> int:
    count = 0
    for _, dirnames, filenames in os.walk(root):
        if _GIT_DIR in dirnames:
            dirnames.remove(_GIT_DIR)
        count += len(filenames)
    return count
