"""MetricsStage — aggregate the analysis outputs."""

from git_eval.analysis.domain.metrics import collect_metrics
from git_eval.analysis.domain.results import (
    CodeStructure,
    DocumentationReport,
    SecurityReport,
    StaticAnalysis,
    TestAnalysis,
)
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey


class MetricsStage:
    name = "metrics"
    policy = FailurePolicy.FATAL
    reads = frozenset(
        {
            WorkspaceKey.FILE_COUNT,
            WorkspaceKey.STATIC_ANALYSIS,
            WorkspaceKey.CODE_STRUCTURE,
            WorkspaceKey.TEST_ANALYSIS,
            WorkspaceKey.DOCUMENTATION,
            WorkspaceKey.SECURITY,
        }
    )
    writes = frozenset({WorkspaceKey.METRICS})

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        metrics = collect_metrics(
            static=workspace.require(WorkspaceKey.STATIC_ANALYSIS, StaticAnalysis),
            code=workspace.require(WorkspaceKey.CODE_STRUCTURE, CodeStructure),
            tests=workspace.require(WorkspaceKey.TEST_ANALYSIS, TestAnalysis),
            documentation=workspace.require(
                WorkspaceKey.DOCUMENTATION, DocumentationReport
            ),
            security=workspace.require(WorkspaceKey.SECURITY, SecurityReport),
            file_count=workspace.require(WorkspaceKey.FILE_COUNT, int),
        )
        workspace.put(WorkspaceKey.METRICS, metrics)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass
