"""PipelineOrchestrator — runs one repository job through a PipelinePlan."""

import asyncio
import time

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.core.best_effort import best_effort
from git_eval.core.errors import GitEvalError, PipelineError, StageExecutionError
from git_eval.job.application.failure import as_git_eval_error, mark_failed
from git_eval.job.domain.job import JobRecord, JobStatus, JobUpdate
from git_eval.job.domain.store import JobStore
from git_eval.pipeline.domain.context import RepositoryJobPayload, RunContext
from git_eval.pipeline.domain.observer import PipelineObserver
from git_eval.pipeline.domain.plan import PipelinePlan, StageGroup
from git_eval.pipeline.domain.stage import FailurePolicy, Stage
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey


class PipelineOrchestrator:
    """Claims a job, executes the plan group by group, and records the outcome.

    The orchestrator is the single place where a run's failure is caught: the
    job is marked failed with a description, an error code and a retriable
    flag, and the original exception is re-raised to the caller. Degradable
    stages are the only other place an exception is absorbed.

    Progress checkpoints are written after every group except the last, where
    the completion update carries progress 100 itself.
    """

    def __init__(
        self,
        plan: PipelinePlan,
        job_store: JobStore,
        observer: PipelineObserver,
    ) -> None:
        self._plan = plan
        self._job_store = job_store
        self._observer = observer

    async def run(self, job_id: str) -> JobRecord:
        """Execute the job and return its final record.

        Raises:
            InvalidJobTransitionError: if the job is not pending. The job is
                left untouched.
            JobNotFoundError: if no job has this id.
            GitEvalError: whatever aborted the run, after the job was marked
                failed.
        """
        job = await self._job_store.claim_job(job_id)
        workspace = Workspace()
        repo = str(job.payload.get("repository_url", job_id))
        started_at = time.monotonic()

        try:
            context = RunContext.for_job(
                job_id=job_id, payload=RepositoryJobPayload.model_validate(job.payload)
            )
            repo = context.repo_name
            self._observer.run_started(
                job_id=job_id, repo=repo, total_stages=len(self._plan.stages)
            )
            job = await self._execute(job_id, workspace, context)
        except Exception as exc:
            error = as_git_eval_error(exc)
            await mark_failed(
                self._job_store,
                job_id,
                error,
                on_error=lambda e: self._observer.failure_record_failed(
                    job_id=job_id, reason=str(e)
                ),
            )
            self._observer.run_failed(
                job_id=job_id,
                repo=repo,
                error_code=error.code.value,
                retriable=error.retriable,
                reason=str(error),
            )
            if error is exc:
                raise
            raise error from exc
        finally:
            await best_effort(
                workspace.release(),
                on_error=lambda exc: self._observer.scratch_release_failed(
                    job_id=job_id, reason=str(exc)
                ),
            )

        if workspace.get(WorkspaceKey.CACHE_HIT):
            self._observer.run_served_from_cache(
                job_id=job_id, repo=repo, result_id=job.result_id or ""
            )
        else:
            self._observer.run_completed(
                job_id=job_id,
                repo=repo,
                result_id=job.result_id or "",
                elapsed_seconds=time.monotonic() - started_at,
            )
        return job

    async def _execute(
        self, job_id: str, workspace: Workspace, context: RunContext
    ) -> JobRecord:
        last_index = len(self._plan.groups) - 1
        for index, group in enumerate(self._plan.groups):
            await self._run_group(group, workspace, context)

            if index == 0 and workspace.get(WorkspaceKey.CACHE_HIT):
                break
            if index < last_index:
                await self._report_progress(job_id, group.checkpoint)

        evaluation = workspace.get(WorkspaceKey.EVALUATION)
        if not isinstance(evaluation, Evaluation):
            raise PipelineError(
                f"Failed to complete job {job_id}: the plan produced no evaluation"
            )
        return await self._job_store.update_job(
            job_id,
            JobUpdate(status=JobStatus.COMPLETED, progress=100, result_id=evaluation.id),
        )

    async def _run_group(
        self, group: StageGroup, workspace: Workspace, context: RunContext
    ) -> None:
        if not group.is_concurrent:
            await self._run_stage(group.stages[0], workspace, context)
            return

        try:
            async with asyncio.TaskGroup() as tg:
                for stage in group.stages:
                    tg.create_task(self._run_stage(stage, workspace, context))
        except* Exception as eg:
            # Siblings were cancelled by the TaskGroup; surface the first failure.
            raise eg.exceptions[0]

    async def _run_stage(
        self, stage: Stage, workspace: Workspace, context: RunContext
    ) -> None:
        view = workspace.scoped(stage=stage.name, reads=stage.reads, writes=stage.writes)
        self._observer.stage_started(job_id=context.job_id, stage=stage.name)
        start = time.monotonic()
        try:
            await stage.execute(view, context)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            if stage.policy is FailurePolicy.DEGRADABLE:
                self._observer.stage_degraded(
                    job_id=context.job_id, stage=stage.name, reason=reason
                )
                stage.fallback(view, context, reason)
                return
            self._observer.stage_failed(
                job_id=context.job_id, stage=stage.name, reason=reason
            )
            if isinstance(exc, GitEvalError):
                raise
            raise StageExecutionError(
                stage=stage.name, reason=f"{type(exc).__name__}: {reason}"
            ) from exc

        self._observer.stage_completed(
            job_id=context.job_id,
            stage=stage.name,
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    async def _report_progress(self, job_id: str, progress: int) -> None:
        updated = await best_effort(
            self._job_store.update_job(job_id, JobUpdate(progress=progress)),
            on_error=lambda exc: self._observer.progress_update_failed(
                job_id=job_id, progress=progress, reason=str(exc)
            ),
        )
        if updated is not None:
            self._observer.progress_updated(job_id=job_id, progress=progress)
