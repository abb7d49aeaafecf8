"""VisualizationStage — chart data derived from the metrics aggregate."""

from git_eval.analysis.domain.results import Metrics
from git_eval.artifact.domain.evaluation import Chart, ChartPoint, Visualizations
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.scoring.domain.score import ScoreReport


def language_chart(languages: dict[str, int]) -> Chart:
    total = sum(languages.values())
    return Chart(
        type="pie",
        title="Language Distribution",
        data=[
            ChartPoint(
                label=name,
                value=size,
                percentage=round(size / total * 100, 1) if total else 0.0,
            )
            for name, size in languages.items()
        ],
    )


def coverage_chart(coverage: int) -> Chart:
    if coverage >= 80:
        color = "green"
    elif coverage >= 60:
        color = "yellow"
    else:
        color = "red"
    return Chart(
        type="progress",
        title="Test Coverage",
        data=[ChartPoint(label="coverage", value=coverage, max_value=100)],
        color=color,
    )


def complexity_chart(distribution: dict[str, int]) -> Chart:
    return Chart(
        type="bar",
        title="Code Complexity Distribution",
        data=[ChartPoint(label=level, value=count) for level, count in distribution.items()],
    )


def category_chart(report: ScoreReport) -> Chart:
    return Chart(
        type="bar",
        title="Category Scores",
        data=[
            ChartPoint(
                label=category.category,
                value=category.score,
                max_value=category.max_points,
                percentage=round(category.score / category.max_points * 100, 1),
            )
            for category in report.category_scores
        ],
    )


class VisualizationStage:
    """Builds every chart except the category chart, which needs the score.

    Scoring runs concurrently with this stage, so the category chart is added
    during report assembly.
    """

    name = "visualization"
    policy = FailurePolicy.DEGRADABLE
    reads = frozenset({WorkspaceKey.METRICS})
    writes = frozenset({WorkspaceKey.VISUALIZATIONS})

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        metrics = workspace.require(WorkspaceKey.METRICS, Metrics)
        workspace.put(
            WorkspaceKey.VISUALIZATIONS,
            Visualizations(
                language_chart=language_chart(metrics.languages),
                coverage_chart=coverage_chart(metrics.test_coverage),
                complexity_chart=complexity_chart(metrics.complexity.distribution),
            ),
        )

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        workspace.put(WorkspaceKey.VISUALIZATIONS, Visualizations())
