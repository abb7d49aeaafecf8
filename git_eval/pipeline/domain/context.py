"""RunContext — the immutable facts about the job a run is executing."""

from pydantic import BaseModel, Field

from git_eval.artifact.domain.key import CacheKey


class RepositoryJobPayload(BaseModel, frozen=True):
    """Payload stored on a repository-kind JobRecord."""

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    repository_url: str = Field(min_length=1)
    force: bool = False


class RunContext(BaseModel, frozen=True):
    job_id: str = Field(min_length=1)
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    repository_url: str = Field(min_length=1)
    force: bool = False

    @classmethod
    def for_job(cls, job_id: str, payload: RepositoryJobPayload) -> "RunContext":
        return cls(job_id=job_id, **payload.model_dump())

    @property
    def repo_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def key(self, version: str) -> CacheKey:
        return CacheKey(owner=self.owner, name=self.repo, version=version)
