"""StructlogPipelineObserver — production observer that delegates to structlog."""

import structlog


class StructlogPipelineObserver:
    """Logs pipeline domain events to structlog.

    Does NOT inherit from PipelineObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(self, job_id: str, repo: str, total_stages: int) -> None:
        self._log.info(
            "pipeline.run.started", job_id=job_id, repo=repo, total_stages=total_stages
        )

    def run_served_from_cache(self, job_id: str, repo: str, result_id: str) -> None:
        self._log.info(
            "pipeline.run.cache_hit", job_id=job_id, repo=repo, result_id=result_id
        )

    def run_completed(
        self, job_id: str, repo: str, result_id: str, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "pipeline.run.completed",
            job_id=job_id,
            repo=repo,
            result_id=result_id,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def run_failed(
        self, job_id: str, repo: str, error_code: str, retriable: bool, reason: str
    ) -> None:
        self._log.error(
            "pipeline.run.failed",
            job_id=job_id,
            repo=repo,
            error_code=error_code,
            retriable=retriable,
            reason=reason,
        )

    def stage_started(self, job_id: str, stage: str) -> None:
        self._log.debug("pipeline.stage.started", job_id=job_id, stage=stage)

    def stage_completed(self, job_id: str, stage: str, duration_ms: int) -> None:
        self._log.info(
            "pipeline.stage.completed", job_id=job_id, stage=stage, duration_ms=duration_ms
        )

    def stage_degraded(self, job_id: str, stage: str, reason: str) -> None:
        self._log.warning(
            "pipeline.stage.degraded", job_id=job_id, stage=stage, reason=reason
        )

    def stage_failed(self, job_id: str, stage: str, reason: str) -> None:
        self._log.error("pipeline.stage.failed", job_id=job_id, stage=stage, reason=reason)

    def progress_updated(self, job_id: str, progress: int) -> None:
        self._log.info("pipeline.progress.updated", job_id=job_id, progress=progress)

    def progress_update_failed(self, job_id: str, progress: int, reason: str) -> None:
        self._log.warning(
            "pipeline.progress.update_failed",
            job_id=job_id,
            progress=progress,
            reason=reason,
        )

    def failure_record_failed(self, job_id: str, reason: str) -> None:
        self._log.error("pipeline.job.mark_failed_failed", job_id=job_id, reason=reason)

    def scratch_release_failed(self, job_id: str, reason: str) -> None:
        self._log.warning("pipeline.scratch.release_failed", job_id=job_id, reason=reason)
