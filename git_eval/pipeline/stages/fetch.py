"""FetchStage — repository metadata plus a local copy pinned to the resolved version."""

from pathlib import Path

from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.source.domain.provider import ContentProvider, MetadataProvider


class FetchStage:
    name = "fetch"
    policy = FailurePolicy.FATAL
    reads = frozenset({WorkspaceKey.VERSION})
    writes = frozenset(
        {
            WorkspaceKey.CLONE_PATH,
            WorkspaceKey.FILE_COUNT,
            WorkspaceKey.REPOSITORY_METADATA,
        }
    )

    def __init__(
        self,
        metadata_provider: MetadataProvider,
        content_provider: ContentProvider,
        scratch_dir: Path,
    ) -> None:
        self._metadata_provider = metadata_provider
        self._content_provider = content_provider
        self._scratch_dir = scratch_dir

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        version = workspace.require(WorkspaceKey.VERSION, str)
        metadata = await self._metadata_provider.get_metadata(
            context.owner, context.repo
        )
        workspace.put(WorkspaceKey.REPOSITORY_METADATA, metadata)

        destination = self._scratch_dir / f"{context.owner}-{context.repo}-{context.job_id}"
        # Registered before fetching so a partial copy is removed at run end.
        workspace.register_scratch(destination)
        content = await self._content_provider.fetch(
            owner=context.owner,
            name=context.repo,
            version=version,
            size_kb=metadata.size_kb,
            destination=destination,
        )
        workspace.put(WorkspaceKey.CLONE_PATH, content.path)
        workspace.put(WorkspaceKey.FILE_COUNT, content.file_count)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass
