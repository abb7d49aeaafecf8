"""JobStore Protocol — persistence port for JobRecords."""

from typing import Any, Protocol

from git_eval.job.domain.job import JobKind, JobRecord, JobStatus, JobUpdate


class JobStore(Protocol):
    """Structural interface for job persistence.

    Every call is an independent update; there is no transaction spanning a run.
    """

    async def create_job(self, kind: JobKind, payload: dict[str, Any]) -> JobRecord: ...

    async def claim_job(self, job_id: str) -> JobRecord:
        """Atomically move a pending job to processing.

        Raises:
            JobNotFoundError: if no job has this id.
            InvalidJobTransitionError: if the job is not pending.
        """
        ...

    async def update_job(self, job_id: str, update: JobUpdate) -> JobRecord: ...

    async def get_job(self, job_id: str) -> JobRecord | None: ...

    async def list_jobs(
        self, status: JobStatus | None = None, limit: int = 10
    ) -> list[JobRecord]: ...
