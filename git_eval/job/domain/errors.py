"""Error types raised by the job domain."""

from git_eval.core.errors import PipelineError


class InvalidJobTransitionError(PipelineError):
    """Raised when a job status change would violate the lifecycle."""

    def __init__(self, job_id: str, current: str, target: str) -> None:
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(
            f"Failed to transition job {job_id}: {current} -> {target} is not allowed"
        )


class ProgressRegressionError(PipelineError):
    """Raised when a progress update would lower the recorded progress."""

    def __init__(self, job_id: str, current: int, target: int) -> None:
        super().__init__(
            f"Failed to update job {job_id} progress: {target} is below {current}"
        )
