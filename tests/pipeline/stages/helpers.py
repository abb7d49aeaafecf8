"""Shared builders for stage tests."""

from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import Stage
from git_eval.pipeline.domain.workspace import Workspace


def make_context(force: bool = False, job_id: str = "job-1") -> RunContext:
    return RunContext(
        job_id=job_id,
        owner="octo",
        repo="hello",
        repository_url="https://github.com/octo/hello",
        force=force,
    )


def view_for(workspace: Workspace, stage: Stage) -> Workspace:
    """The same scoped view the orchestrator hands the stage."""
    return workspace.scoped(stage=stage.name, reads=stage.reads, writes=stage.writes)
