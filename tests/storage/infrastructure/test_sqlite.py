"""Tests for SqliteStore against a real on-disk database."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from git_eval.core.errors import ErrorCode, JobNotFoundError
from git_eval.job.domain.errors import InvalidJobTransitionError, ProgressRegressionError
from git_eval.job.domain.job import JobKind, JobStatus, JobUpdate
from git_eval.profile.domain.profile import ConsistencyMetrics, UserProfile
from git_eval.storage.infrastructure.sqlite import SqliteStore
from tests.artifact.fake_evaluation import make_evaluation

_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
async def store(tmp_path: Path) -> AsyncIterator[SqliteStore]:
    opened = await SqliteStore.open(tmp_path / "db" / "git-eval.db", clock=lambda: _NOW)
    yield opened
    await opened.close()


def _make_profile(username: str = "octo", score: float = 70.0) -> UserProfile:
    return UserProfile(
        username=username,
        overall_score=score,
        repository_count=2,
        evaluated_repository_count=1,
        consistency=ConsistencyMetrics(
            average_score=score, score_variance=0.0, quality_trend="stable"
        ),
        evaluated_at=_NOW,
    )


# ----------------------------------------------------------------------
# Jobs
# ----------------------------------------------------------------------


class TestJobs:
    async def test_created_job_is_pending_and_readable(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {"owner": "octo"})

        loaded = await store.get_job(job.id)

        assert loaded == job
        assert loaded is not None
        assert loaded.status == JobStatus.PENDING
        assert loaded.payload == {"owner": "octo"}

    async def test_unknown_job_is_none(self, store: SqliteStore) -> None:
        assert await store.get_job("nope") is None

    async def test_claim_moves_pending_to_processing(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})

        claimed = await store.claim_job(job.id)

        assert claimed.status == JobStatus.PROCESSING
        assert claimed.started_at == _NOW

    async def test_second_claim_is_rejected(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})
        await store.claim_job(job.id)

        with pytest.raises(InvalidJobTransitionError):
            await store.claim_job(job.id)

    async def test_claim_of_unknown_job(self, store: SqliteStore) -> None:
        with pytest.raises(JobNotFoundError):
            await store.claim_job("nope")

    async def test_progress_is_persisted(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})
        await store.claim_job(job.id)

        await store.update_job(job.id, JobUpdate(progress=40))

        loaded = await store.get_job(job.id)
        assert loaded is not None
        assert loaded.progress == 40

    async def test_progress_never_decreases(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})
        await store.claim_job(job.id)
        await store.update_job(job.id, JobUpdate(progress=40))

        with pytest.raises(ProgressRegressionError):
            await store.update_job(job.id, JobUpdate(progress=20))

    async def test_completion_records_result(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})
        await store.claim_job(job.id)

        await store.update_job(
            job.id,
            JobUpdate(status=JobStatus.COMPLETED, progress=100, result_id="artifact-1"),
        )

        loaded = await store.get_job(job.id)
        assert loaded is not None
        assert loaded.status == JobStatus.COMPLETED
        assert loaded.result_id == "artifact-1"
        assert loaded.completed_at == _NOW

    async def test_failure_records_error_code_and_retriable(
        self, store: SqliteStore
    ) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})
        await store.claim_job(job.id)

        await store.update_job(
            job.id,
            JobUpdate(
                status=JobStatus.FAILED,
                error="Failed to call GitHub API: rate limit exceeded",
                error_code=ErrorCode.RATE_LIMITED,
                retriable=True,
            ),
        )

        loaded = await store.get_job(job.id)
        assert loaded is not None
        assert loaded.error_code == ErrorCode.RATE_LIMITED
        assert loaded.retriable is True

    async def test_terminal_job_cannot_be_updated(self, store: SqliteStore) -> None:
        job = await store.create_job(JobKind.REPOSITORY, {})
        await store.claim_job(job.id)
        await store.update_job(job.id, JobUpdate(status=JobStatus.FAILED))

        with pytest.raises(InvalidJobTransitionError):
            await store.update_job(job.id, JobUpdate(progress=50))

    async def test_update_of_unknown_job(self, store: SqliteStore) -> None:
        with pytest.raises(JobNotFoundError):
            await store.update_job("nope", JobUpdate(progress=1))

    async def test_list_jobs_filters_by_status(self, store: SqliteStore) -> None:
        first = await store.create_job(JobKind.REPOSITORY, {})
        second = await store.create_job(JobKind.USER_PROFILE, {"username": "octo"})
        await store.claim_job(second.id)

        pending = await store.list_jobs(status=JobStatus.PENDING)
        everything = await store.list_jobs()

        assert [j.id for j in pending] == [first.id]
        assert {j.id for j in everything} == {first.id, second.id}


# ----------------------------------------------------------------------
# Artifacts
# ----------------------------------------------------------------------


class TestArtifacts:
    async def test_put_assigns_id_and_is_readable_by_id_and_key(
        self, store: SqliteStore
    ) -> None:
        stored = await store.put_artifact(make_evaluation())

        assert stored.id
        assert await store.get_artifact(stored.id) == stored
        assert await store.get_artifact_by_key(stored.key) == stored

    async def test_first_writer_wins(self, store: SqliteStore) -> None:
        first = await store.put_artifact(make_evaluation(score=80.0))

        second = await store.put_artifact(make_evaluation(score=20.0))

        assert second.id == first.id
        assert second.overall_score == 80.0

    async def test_replace_overwrites_body_and_keeps_id(self, store: SqliteStore) -> None:
        first = await store.put_artifact(make_evaluation(score=80.0))

        second = await store.put_artifact(make_evaluation(score=20.0), replace=True)

        assert second.id == first.id
        assert second.overall_score == 20.0
        assert await store.get_artifact(first.id) == second
        assert len(await store.list_artifacts("octo", "hello")) == 1

    async def test_replace_without_existing_artifact_inserts(
        self, store: SqliteStore
    ) -> None:
        stored = await store.put_artifact(make_evaluation(), replace=True)

        assert await store.get_artifact_by_key(stored.key) == stored

    async def test_stored_artifact_is_not_marked_cached(self, store: SqliteStore) -> None:
        stored = await store.put_artifact(
            make_evaluation().model_copy(update={"cached": True})
        )
        assert stored.cached is False

    async def test_list_is_newest_first(self, store: SqliteStore) -> None:
        base = datetime(2025, 1, 1, tzinfo=UTC)
        await store.put_artifact(make_evaluation(commit_sha="old", evaluated_at=base))
        await store.put_artifact(
            make_evaluation(commit_sha="new", evaluated_at=base + timedelta(days=1))
        )
        await store.put_artifact(make_evaluation(repo="other", commit_sha="x"))

        listed = await store.list_artifacts("octo", "hello")

        assert [e.commit_sha for e in listed] == ["new", "old"]

    async def test_missing_artifact_is_none(self, store: SqliteStore) -> None:
        assert await store.get_artifact("nope") is None


# ----------------------------------------------------------------------
# Profiles
# ----------------------------------------------------------------------


class TestProfiles:
    async def test_save_assigns_id(self, store: SqliteStore) -> None:
        saved = await store.save_profile(_make_profile())

        assert saved.id
        assert await store.get_profile("octo") == saved

    async def test_resave_replaces_body_and_keeps_id(self, store: SqliteStore) -> None:
        first = await store.save_profile(_make_profile(score=50.0))

        second = await store.save_profile(_make_profile(score=90.0))

        loaded = await store.get_profile("octo")
        assert second.id == first.id
        assert loaded is not None
        assert loaded.overall_score == 90.0

    async def test_unknown_profile_is_none(self, store: SqliteStore) -> None:
        assert await store.get_profile("ghost") is None
