"""Structlog implementation of the ProfileObserver port."""

import structlog


class StructlogProfileObserver:
    """Delegates profile aggregation events to structlog.

    Satisfies the ProfileObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def profile_started(self, job_id: str, username: str, repositories: int) -> None:
        self._log.info(
            "profile.started", job_id=job_id, username=username, repositories=repositories
        )

    def profile_repository_missing(self, job_id: str, repo: str, reason: str) -> None:
        self._log.info("profile.repository_missing", job_id=job_id, repo=repo, reason=reason)

    def profile_completed(
        self, job_id: str, username: str, evaluated: int, missing: int
    ) -> None:
        self._log.info(
            "profile.completed",
            job_id=job_id,
            username=username,
            evaluated=evaluated,
            missing=missing,
        )

    def profile_failed(self, job_id: str, username: str, reason: str) -> None:
        self._log.error("profile.failed", job_id=job_id, username=username, reason=reason)

    def profile_progress_update_failed(
        self, job_id: str, progress: int, reason: str
    ) -> None:
        self._log.warning(
            "profile.progress.update_failed", job_id=job_id, progress=progress, reason=reason
        )

    def profile_failure_record_failed(self, job_id: str, reason: str) -> None:
        self._log.error("profile.job.mark_failed_failed", job_id=job_id, reason=reason)
