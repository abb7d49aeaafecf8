"""CompositePipelineObserver — fans out all events to a list of observers."""

from git_eval.pipeline.domain.observer import PipelineObserver


class CompositePipelineObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from PipelineObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[PipelineObserver]) -> None:
        self._observers = observers

    def run_started(self, job_id: str, repo: str, total_stages: int) -> None:
        for obs in self._observers:
            obs.run_started(job_id=job_id, repo=repo, total_stages=total_stages)

    def run_served_from_cache(self, job_id: str, repo: str, result_id: str) -> None:
        for obs in self._observers:
            obs.run_served_from_cache(job_id=job_id, repo=repo, result_id=result_id)

    def run_completed(
        self, job_id: str, repo: str, result_id: str, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.run_completed(
                job_id=job_id,
                repo=repo,
                result_id=result_id,
                elapsed_seconds=elapsed_seconds,
            )

    def run_failed(
        self, job_id: str, repo: str, error_code: str, retriable: bool, reason: str
    ) -> None:
        for obs in self._observers:
            obs.run_failed(
                job_id=job_id,
                repo=repo,
                error_code=error_code,
                retriable=retriable,
                reason=reason,
            )

    def stage_started(self, job_id: str, stage: str) -> None:
        for obs in self._observers:
            obs.stage_started(job_id=job_id, stage=stage)

    def stage_completed(self, job_id: str, stage: str, duration_ms: int) -> None:
        for obs in self._observers:
            obs.stage_completed(job_id=job_id, stage=stage, duration_ms=duration_ms)

    def stage_degraded(self, job_id: str, stage: str, reason: str) -> None:
        for obs in self._observers:
            obs.stage_degraded(job_id=job_id, stage=stage, reason=reason)

    def stage_failed(self, job_id: str, stage: str, reason: str) -> None:
        for obs in self._observers:
            obs.stage_failed(job_id=job_id, stage=stage, reason=reason)

    def progress_updated(self, job_id: str, progress: int) -> None:
        for obs in self._observers:
            obs.progress_updated(job_id=job_id, progress=progress)

    def progress_update_failed(self, job_id: str, progress: int, reason: str) -> None:
        for obs in self._observers:
            obs.progress_update_failed(job_id=job_id, progress=progress, reason=reason)

    def failure_record_failed(self, job_id: str, reason: str) -> None:
        for obs in self._observers:
            obs.failure_record_failed(job_id=job_id, reason=reason)

    def scratch_release_failed(self, job_id: str, reason: str) -> None:
        for obs in self._observers:
            obs.scratch_release_failed(job_id=job_id, reason=reason)
