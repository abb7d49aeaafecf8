"""GitHubClient — VersionResolver and MetadataProvider backed by the GitHub REST API."""

import time
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from git_eval.config.domain.source import SourceConfig
from git_eval.core.errors import (
    CollaboratorTimeoutError,
    MalformedResponseError,
    RateLimitedError,
    RepositoryInaccessibleError,
    RepositoryNotFoundError,
    UpstreamError,
)
from git_eval.source.domain.metadata import (
    Contributor,
    RepositoryMetadata,
    RepositoryRef,
)

_SERVICE = "GitHub API"
_CONTRIBUTOR_LIMIT = 10
_USER_REPOSITORY_LIMIT = 100


class _Owner(BaseModel):
    login: str


class _License(BaseModel):
    spdx_id: str | None = None


class _RepositoryPayload(BaseModel):
    name: str
    owner: _Owner
    description: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    updated_at: datetime | None = None
    license: _License | None = None
    topics: list[str] = Field(default_factory=list)
    default_branch: str
    size: int = 0


class _CommitPayload(BaseModel):
    sha: str = Field(min_length=1)


class _ContributorPayload(BaseModel):
    login: str
    contributions: int = 0
    avatar_url: str | None = None


class GitHubClient:
    """Thin async client over the GitHub REST API.

    Satisfies VersionResolver and MetadataProvider structurally. Every HTTP
    failure is translated into the git-eval error taxonomy before leaving
    this class.

    An ``http_client`` may be injected; otherwise one is created from the
    config and owned (closed by ``aclose``) by this instance.
    """

    def __init__(
        self,
        config: SourceConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            headers=_headers(config),
            timeout=config.request_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def resolve_version(self, owner: str, name: str) -> str:
        repository = await self._get_repository(owner, name)
        data = await self._get_json(
            f"/repos/{owner}/{name}/commits/{repository.default_branch}",
            subject=RepositoryRef(owner=owner, name=name),
        )
        return _parse(_CommitPayload, data).sha

    async def get_metadata(self, owner: str, name: str) -> RepositoryMetadata:
        subject = RepositoryRef(owner=owner, name=name)
        repository = await self._get_repository(owner, name)
        languages = await self._get_json(
            f"/repos/{owner}/{name}/languages", subject=subject
        )
        contributors = await self._get_json(
            f"/repos/{owner}/{name}/contributors",
            subject=subject,
            params={"per_page": _CONTRIBUTOR_LIMIT},
        )

        if not isinstance(languages, dict):
            raise MalformedResponseError(
                service=_SERVICE, reason="languages is not an object"
            )

        return RepositoryMetadata(
            languages=list(languages),
            stars=repository.stargazers_count,
            forks=repository.forks_count,
            watchers=repository.watchers_count,
            open_issues=repository.open_issues_count,
            last_updated=repository.updated_at,
            license=repository.license.spdx_id if repository.license else None,
            contributors=[
                Contributor(
                    username=c.login,
                    contributions=c.contributions,
                    avatar_url=c.avatar_url,
                )
                for c in _parse_list(_ContributorPayload, contributors or [])
            ],
            topics=repository.topics,
            description=repository.description,
            default_branch=repository.default_branch,
            size_kb=repository.size,
        )

    async def list_user_repositories(self, username: str) -> list[RepositoryRef]:
        data = await self._get_json(
            f"/users/{username}/repos",
            subject=None,
            params={
                "type": "public",
                "per_page": _USER_REPOSITORY_LIMIT,
                "sort": "updated",
            },
        )
        return [
            RepositoryRef(owner=r.owner.login, name=r.name)
            for r in _parse_list(_RepositoryPayload, data or [])
        ]

    async def _get_repository(self, owner: str, name: str) -> _RepositoryPayload:
        data = await self._get_json(
            f"/repos/{owner}/{name}", subject=RepositoryRef(owner=owner, name=name)
        )
        return _parse(_RepositoryPayload, data)

    async def _get_json(
        self,
        path: str,
        subject: RepositoryRef | None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET *path* and return the decoded body, or None for 204 No Content.

        *subject* names the repository a 404/403 refers to; None for
        endpoints that are not repository-scoped.
        """
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise CollaboratorTimeoutError(
                operation=f"call {_SERVICE} {path}",
                timeout_seconds=self._config.request_timeout_seconds,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(service=_SERVICE, reason=str(exc)) from exc

        _raise_for_status(response, subject)

        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(service=_SERVICE, reason=str(exc)) from exc


def _headers(config: SourceConfig) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": config.user_agent,
    }
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"
    return headers


def _raise_for_status(response: httpx.Response, subject: RepositoryRef | None) -> None:
    status = response.status_code
    if status < 400:
        return

    if status == httpx.codes.TOO_MANY_REQUESTS or (
        status == httpx.codes.FORBIDDEN
        and response.headers.get("x-ratelimit-remaining") == "0"
    ):
        raise RateLimitedError(
            service=_SERVICE, retry_after_seconds=_retry_after(response)
        )
    if subject is not None and status == httpx.codes.NOT_FOUND:
        raise RepositoryNotFoundError(owner=subject.owner, name=subject.name)
    if subject is not None and status == httpx.codes.FORBIDDEN:
        raise RepositoryInaccessibleError(owner=subject.owner, name=subject.name)

    raise UpstreamError(
        service=_SERVICE,
        reason=response.reason_phrase or "request failed",
        status_code=status,
    )


def _retry_after(response: httpx.Response) -> float | None:
    retry_after = response.headers.get("retry-after")
    if retry_after is not None:
        try:
            return float(retry_after)
        except ValueError:
            return None
    reset = response.headers.get("x-ratelimit-reset")
    if reset is not None:
        try:
            return max(0.0, float(reset) - time.time())
        except ValueError:
            return None
    return None


def _parse[M: BaseModel](model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(service=_SERVICE, reason=str(exc)) from exc


def _parse_list[M: BaseModel](model: type[M], data: Any) -> list[M]:
    if not isinstance(data, list):
        raise MalformedResponseError(service=_SERVICE, reason="expected a list")
    return [_parse(model, item) for item in data]
