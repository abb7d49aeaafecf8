"""CacheCheckStage — resolve the current version and look for a stored evaluation."""

from git_eval.cache.application.coordinator import CacheCoordinator
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.source.domain.provider import VersionResolver


class CacheCheckStage:
    """Always resolves the version fresh; a forced run skips only the lookup."""

    name = "cache-check"
    policy = FailurePolicy.FATAL
    reads: frozenset[WorkspaceKey] = frozenset()
    writes = frozenset(
        {WorkspaceKey.VERSION, WorkspaceKey.CACHE_HIT, WorkspaceKey.EVALUATION}
    )

    def __init__(
        self, version_resolver: VersionResolver, coordinator: CacheCoordinator
    ) -> None:
        self._version_resolver = version_resolver
        self._coordinator = coordinator

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        version = await self._version_resolver.resolve_version(
            context.owner, context.repo
        )
        workspace.put(WorkspaceKey.VERSION, version)

        if context.force:
            workspace.put(WorkspaceKey.CACHE_HIT, False)
            return

        cached = await self._coordinator.lookup(context.key(version))
        workspace.put(WorkspaceKey.CACHE_HIT, cached is not None)
        if cached is not None:
            workspace.put(WorkspaceKey.EVALUATION, cached)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass
