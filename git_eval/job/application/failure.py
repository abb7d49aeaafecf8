"""Recording a run's failure on its JobRecord."""

from collections.abc import Callable

from git_eval.core.best_effort import best_effort
from git_eval.core.errors import GitEvalError, PipelineError
from git_eval.job.domain.job import JobStatus, JobUpdate
from git_eval.job.domain.store import JobStore


def as_git_eval_error(exc: Exception) -> GitEvalError:
    """Return *exc* itself if it belongs to the taxonomy, otherwise wrap it."""
    if isinstance(exc, GitEvalError):
        return exc
    return PipelineError(f"Failed to run job: {type(exc).__name__}: {exc}")


async def mark_failed(
    job_store: JobStore,
    job_id: str,
    error: GitEvalError,
    on_error: Callable[[Exception], None],
) -> None:
    """Move the job to failed with the error's description, code and retriability.

    Best-effort: the run's own error is what the caller sees, so a failure to
    record it is only reported through *on_error*.
    """
    await best_effort(
        job_store.update_job(
            job_id,
            JobUpdate(
                status=JobStatus.FAILED,
                error=str(error),
                error_code=error.code,
                retriable=error.retriable,
            ),
        ),
        on_error=on_error,
    )
