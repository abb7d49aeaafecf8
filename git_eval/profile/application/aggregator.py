"""ProfileAggregator — runs a user-profile job from already-evaluated repositories."""

from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.artifact.domain.key import CacheKey
from git_eval.cache.application.coordinator import CacheCoordinator
from git_eval.core.best_effort import best_effort
from git_eval.core.errors import InputError
from git_eval.job.application.failure import as_git_eval_error, mark_failed
from git_eval.job.domain.job import JobRecord, JobStatus, JobUpdate
from git_eval.job.domain.store import JobStore
from git_eval.profile.domain.aggregate import build_profile
from git_eval.profile.domain.observer import ProfileObserver
from git_eval.profile.domain.store import ProfileStore
from git_eval.source.domain.metadata import RepositoryRef
from git_eval.source.domain.provider import MetadataProvider, VersionResolver


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UserProfileJobPayload(BaseModel, frozen=True):
    """Payload stored on a user_profile-kind JobRecord."""

    username: str = Field(min_length=1)


class ProfileAggregator:
    """Builds a UserProfile from the cached evaluations of a user's repositories.

    No repository is evaluated here: each one is looked up through the cache
    coordinator at its current version, and repositories without an
    evaluation are listed as missing. A repository that disappears or becomes
    inaccessible between listing and lookup is also reported as missing;
    every other error fails the job.
    """

    def __init__(
        self,
        metadata_provider: MetadataProvider,
        version_resolver: VersionResolver,
        coordinator: CacheCoordinator,
        profile_store: ProfileStore,
        job_store: JobStore,
        observer: ProfileObserver,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._metadata_provider = metadata_provider
        self._version_resolver = version_resolver
        self._coordinator = coordinator
        self._profile_store = profile_store
        self._job_store = job_store
        self._observer = observer
        self._clock = clock

    async def run(self, job_id: str) -> JobRecord:
        """Execute the profile job and return its final record.

        Raises:
            InvalidJobTransitionError: if the job is not pending.
            JobNotFoundError: if no job has this id.
            GitEvalError: whatever aborted the run, after the job was marked
                failed.
        """
        job = await self._job_store.claim_job(job_id)
        username = str(job.payload.get("username", ""))

        try:
            username = UserProfileJobPayload.model_validate(job.payload).username
            repositories = await self._metadata_provider.list_user_repositories(username)
            self._observer.profile_started(
                job_id=job_id, username=username, repositories=len(repositories)
            )

            evaluations: list[Evaluation] = []
            missing: list[str] = []
            for done, ref in enumerate(repositories, start=1):
                evaluation = await self._lookup(job_id, ref)
                if evaluation is None:
                    missing.append(str(ref))
                else:
                    evaluations.append(evaluation)
                if done < len(repositories):
                    await self._report_progress(job_id, done * 100 // len(repositories))

            profile = await self._profile_store.save_profile(
                build_profile(
                    username=username,
                    repository_count=len(repositories),
                    evaluations=evaluations,
                    missing=missing,
                    evaluated_at=self._clock(),
                )
            )
            job = await self._job_store.update_job(
                job_id,
                JobUpdate(status=JobStatus.COMPLETED, progress=100, result_id=profile.id),
            )
        except Exception as exc:
            error = as_git_eval_error(exc)
            await mark_failed(
                self._job_store,
                job_id,
                error,
                on_error=lambda e: self._observer.profile_failure_record_failed(
                    job_id=job_id, reason=str(e)
                ),
            )
            self._observer.profile_failed(
                job_id=job_id, username=username, reason=str(error)
            )
            if error is exc:
                raise
            raise error from exc

        self._observer.profile_completed(
            job_id=job_id,
            username=username,
            evaluated=len(evaluations),
            missing=len(missing),
        )
        return job

    async def _lookup(self, job_id: str, ref: RepositoryRef) -> Evaluation | None:
        try:
            version = await self._version_resolver.resolve_version(ref.owner, ref.name)
        except InputError as exc:
            self._observer.profile_repository_missing(
                job_id=job_id, repo=str(ref), reason=str(exc)
            )
            return None

        evaluation = await self._coordinator.lookup(
            CacheKey(owner=ref.owner, name=ref.name, version=version)
        )
        if evaluation is None:
            self._observer.profile_repository_missing(
                job_id=job_id, repo=str(ref), reason="not evaluated at current version"
            )
        return evaluation

    async def _report_progress(self, job_id: str, progress: int) -> None:
        await best_effort(
            self._job_store.update_job(job_id, JobUpdate(progress=progress)),
            on_error=lambda exc: self._observer.profile_progress_update_failed(
                job_id=job_id, progress=progress, reason=str(exc)
            ),
        )
