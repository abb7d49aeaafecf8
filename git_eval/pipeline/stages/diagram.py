"""ArchitectureDiagramStage — Mermaid diagram from the diagram collaborator."""

from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.pipeline.stages.scoring import SCORING_READS, build_scoring_input
from git_eval.scoring.domain.scorer import DiagramGenerator
from git_eval.source.domain.metadata import RepositoryMetadata


def fallback_diagram(repo: str, languages: list[str]) -> str:
    stack = ", ".join(languages) or "Multiple"
    return (
        "graph TD\n"
        f"    A[{repo}] --> B[{stack}]\n"
        "    B --> C[Source Code]\n"
        "    B --> D[Tests]\n"
        "    C --> E[Build Output]"
    )


class ArchitectureDiagramStage:
    name = "architecture-diagram"
    policy = FailurePolicy.DEGRADABLE
    reads = SCORING_READS
    writes = frozenset({WorkspaceKey.ARCHITECTURE_DIAGRAM})

    def __init__(self, generator: DiagramGenerator) -> None:
        self._generator = generator

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        diagram = await self._generator.generate_diagram(
            build_scoring_input(workspace, context)
        )
        workspace.put(WorkspaceKey.ARCHITECTURE_DIAGRAM, diagram)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        metadata = workspace.get(WorkspaceKey.REPOSITORY_METADATA)
        languages = metadata.languages if isinstance(metadata, RepositoryMetadata) else []
        workspace.put(
            WorkspaceKey.ARCHITECTURE_DIAGRAM, fallback_diagram(context.repo, languages)
        )
