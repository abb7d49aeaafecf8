"""CacheStorageStage — write the evaluation through both caches."""

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.cache.application.coordinator import CacheCoordinator
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey


class CacheStorageStage:
    """Stores under the version resolved by this run and keeps the stored copy.

    A forced run replaces any artifact already stored for that version.
    """

    name = "cache-storage"
    policy = FailurePolicy.FATAL
    reads = frozenset({WorkspaceKey.VERSION, WorkspaceKey.EVALUATION})
    writes = frozenset({WorkspaceKey.EVALUATION})

    def __init__(self, coordinator: CacheCoordinator) -> None:
        self._coordinator = coordinator

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        version = workspace.require(WorkspaceKey.VERSION, str)
        evaluation = workspace.require(WorkspaceKey.EVALUATION, Evaluation)
        stored = await self._coordinator.store(
            context.key(version), evaluation, replace=context.force
        )
        workspace.put(WorkspaceKey.EVALUATION, stored)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass
