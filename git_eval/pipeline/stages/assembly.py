"""ReportAssemblyStage — combine score, diagram, metrics and charts into an Evaluation."""

from collections.abc import Callable
from datetime import UTC, datetime

from git_eval.analysis.domain.results import Metrics
from git_eval.artifact.domain.evaluation import Evaluation, Visualizations
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.pipeline.stages.visualization import category_chart
from git_eval.scoring.domain.score import CODE_QUALITY, PRODUCT_QUALITY, ScoreReport
from git_eval.source.domain.metadata import RepositoryMetadata

_CODE_QUALITY_MAX = 60
_PRODUCT_QUALITY_MAX = 40


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _category_score(report: ScoreReport, name: str, ceiling: int) -> float:
    category = report.category(name)
    return min(float(category.score), ceiling) if category else 0.0


class ReportAssemblyStage:
    name = "report-assembly"
    policy = FailurePolicy.FATAL
    reads = frozenset(
        {
            WorkspaceKey.VERSION,
            WorkspaceKey.METRICS,
            WorkspaceKey.REPOSITORY_METADATA,
            WorkspaceKey.SCORE_REPORT,
            WorkspaceKey.ARCHITECTURE_DIAGRAM,
            WorkspaceKey.VISUALIZATIONS,
        }
    )
    writes = frozenset({WorkspaceKey.EVALUATION})

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        report = workspace.require(WorkspaceKey.SCORE_REPORT, ScoreReport)
        visualizations = workspace.require(WorkspaceKey.VISUALIZATIONS, Visualizations)

        evaluation = Evaluation(
            repository_url=context.repository_url,
            owner=context.owner,
            repo=context.repo,
            commit_sha=workspace.require(WorkspaceKey.VERSION, str),
            overall_score=report.overall_score,
            grade=report.grade,
            code_quality_score=_category_score(report, CODE_QUALITY, _CODE_QUALITY_MAX),
            product_quality_score=_category_score(
                report, PRODUCT_QUALITY, _PRODUCT_QUALITY_MAX
            ),
            summary=report.summary,
            strengths=report.strengths,
            improvements=report.improvements,
            suggestions=report.suggestions,
            category_scores=report.category_scores,
            architecture_diagram=workspace.require(WorkspaceKey.ARCHITECTURE_DIAGRAM, str),
            metrics=workspace.require(WorkspaceKey.METRICS, Metrics),
            metadata=workspace.require(
                WorkspaceKey.REPOSITORY_METADATA, RepositoryMetadata
            ),
            visualizations=visualizations.model_copy(
                update={"category_chart": category_chart(report)}
            ),
            evaluated_at=self._clock(),
        )
        workspace.put(WorkspaceKey.EVALUATION, evaluation)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass
