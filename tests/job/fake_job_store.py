"""FakeJobStore — in-memory JobStore that enforces the same lifecycle rules as SQLite."""

from datetime import UTC, datetime, timedelta
from typing import Any

from git_eval.core.errors import JobNotFoundError, JobStoreError
from git_eval.job.domain.errors import InvalidJobTransitionError
from git_eval.job.domain.job import (
    JobKind,
    JobRecord,
    JobStatus,
    JobUpdate,
    apply_update,
)


class FakeJobStore:
    """Stores JobRecords in a dict and records every update it applied.

    Set ``fail_progress_updates`` to make progress-only updates raise, or
    ``fail_all_updates`` to make every update raise, as a broken database would.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, JobRecord] = {}
        self._updates: list[JobUpdate] = []
        self._tick = 0
        self.fail_progress_updates = False
        self.fail_all_updates = False

    @property
    def updates(self) -> list[JobUpdate]:
        return self._updates

    @property
    def progress_history(self) -> list[int]:
        return [u.progress for u in self._updates if u.progress is not None]

    def _now(self) -> datetime:
        self._tick += 1
        return datetime(2025, 1, 1, tzinfo=UTC) + timedelta(seconds=self._tick)

    async def create_job(self, kind: JobKind, payload: dict[str, Any]) -> JobRecord:
        now = self._now()
        job = JobRecord(
            id=f"job-{len(self._jobs) + 1}",
            kind=kind,
            payload=payload,
            created_at=now,
            updated_at=now,
        )
        self._jobs[job.id] = job
        return job

    async def claim_job(self, job_id: str) -> JobRecord:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id=job_id)
        if job.status != JobStatus.PENDING:
            raise InvalidJobTransitionError(
                job_id=job_id, current=job.status.value, target=JobStatus.PROCESSING.value
            )
        claimed = apply_update(job, JobUpdate(status=JobStatus.PROCESSING), self._now())
        self._jobs[job_id] = claimed
        return claimed

    async def update_job(self, job_id: str, update: JobUpdate) -> JobRecord:
        is_progress_only = update.status is None and update.progress is not None
        if self.fail_all_updates or (self.fail_progress_updates and is_progress_only):
            raise JobStoreError(operation="update", reason="database is locked")
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id=job_id)
        updated = apply_update(job, update, self._now())
        self._jobs[job_id] = updated
        self._updates.append(update)
        return updated

    async def get_job(self, job_id: str) -> JobRecord | None:
        return self._jobs.get(job_id)

    async def list_jobs(
        self, status: JobStatus | None = None, limit: int = 10
    ) -> list[JobRecord]:
        jobs = [j for j in self._jobs.values() if status is None or j.status == status]
        return jobs[:limit]
