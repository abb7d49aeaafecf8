"""PipelineObserver port — domain events emitted while a job runs."""

from typing import Protocol


class PipelineObserver(Protocol):
    """Observer port for pipeline runs.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def run_started(self, job_id: str, repo: str, total_stages: int) -> None: ...

    def run_served_from_cache(self, job_id: str, repo: str, result_id: str) -> None: ...

    def run_completed(
        self, job_id: str, repo: str, result_id: str, elapsed_seconds: float
    ) -> None: ...

    def run_failed(
        self, job_id: str, repo: str, error_code: str, retriable: bool, reason: str
    ) -> None: ...

    def stage_started(self, job_id: str, stage: str) -> None: ...

    def stage_completed(self, job_id: str, stage: str, duration_ms: int) -> None: ...

    def stage_degraded(self, job_id: str, stage: str, reason: str) -> None: ...

    def stage_failed(self, job_id: str, stage: str, reason: str) -> None: ...

    def progress_updated(self, job_id: str, progress: int) -> None: ...

    def progress_update_failed(self, job_id: str, progress: int, reason: str) -> None: ...

    def failure_record_failed(self, job_id: str, reason: str) -> None: ...

    def scratch_release_failed(self, job_id: str, reason: str) -> None: ...
