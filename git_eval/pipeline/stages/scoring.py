"""ScoringStage — hand the aggregate to the scoring collaborator."""

from git_eval.analysis.domain.results import Metrics
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.scoring.domain.scorer import Scorer, ScoringInput
from git_eval.source.domain.metadata import RepositoryMetadata

SCORING_READS = frozenset({WorkspaceKey.METRICS, WorkspaceKey.REPOSITORY_METADATA})


def build_scoring_input(workspace: Workspace, context: RunContext) -> ScoringInput:
    metrics = workspace.require(WorkspaceKey.METRICS, Metrics)
    return ScoringInput(
        owner=context.owner,
        repo=context.repo,
        metadata=workspace.require(WorkspaceKey.REPOSITORY_METADATA, RepositoryMetadata),
        metrics=metrics,
        readme_excerpt=metrics.documentation.readme_excerpt,
    )


class ScoringStage:
    name = "scoring"
    policy = FailurePolicy.FATAL
    reads = SCORING_READS
    writes = frozenset({WorkspaceKey.SCORE_REPORT})

    def __init__(self, scorer: Scorer) -> None:
        self._scorer = scorer

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        report = await self._scorer.score(build_scoring_input(workspace, context))
        workspace.put(WorkspaceKey.SCORE_REPORT, report)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass
