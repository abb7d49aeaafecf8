"""CleanupStage — remove the scratch copy of the repository."""

import asyncio
from pathlib import Path

from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey, remove_tree


class CleanupStage:
    name = "cleanup"
    policy = FailurePolicy.DEGRADABLE
    reads = frozenset({WorkspaceKey.CLONE_PATH})
    writes: frozenset[WorkspaceKey] = frozenset()

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        clone_path = workspace.require(WorkspaceKey.CLONE_PATH, Path)
        await asyncio.to_thread(remove_tree, clone_path)
        workspace.forget_scratch(clone_path)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        # The path stays registered, so releasing the workspace retries removal.
        pass
