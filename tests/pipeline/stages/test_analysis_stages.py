"""Tests for the file analysis stages and MetricsStage."""

from pathlib import Path

from git_eval.analysis.domain.results import (
    CodeStructure,
    DocumentationReport,
    Metrics,
    SecurityReport,
    StaticAnalysis,
    TestAnalysis,
)
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey
from git_eval.pipeline.stages.analysis import FileAnalysisStage, analysis_stages
from git_eval.pipeline.stages.metrics import MetricsStage
from tests.pipeline.stages.helpers import make_context, view_for

K = WorkspaceKey


class TestAnalysisStages:
    def test_writes_are_disjoint(self) -> None:
        stages = analysis_stages()
        writes = [key for stage in stages for key in stage.writes]

        assert len(writes) == len(set(writes)) == 5
        assert all(stage.reads == frozenset({K.CLONE_PATH}) for stage in stages)

    async def test_every_analyzer_runs_on_the_clone(self, tmp_path: Path) -> None:
        (tmp_path / "main.py").write_text("def main():\n    pass\n", encoding="utf-8")
        workspace = Workspace()
        workspace.put(K.CLONE_PATH, tmp_path)

        for stage in analysis_stages():
            await stage.execute(view_for(workspace, stage), make_context())

        static = workspace.get(K.STATIC_ANALYSIS)
        code = workspace.get(K.CODE_STRUCTURE)
        assert isinstance(static, StaticAnalysis)
        assert static.lines_by_language == {"Python": 2}
        assert isinstance(code, CodeStructure)
        assert code.functions == 1
        assert isinstance(workspace.get(K.TEST_ANALYSIS), TestAnalysis)
        assert isinstance(workspace.get(K.DOCUMENTATION), DocumentationReport)
        assert isinstance(workspace.get(K.SECURITY), SecurityReport)

    async def test_custom_analyzer_output_key(self, tmp_path: Path) -> None:
        stage = FileAnalysisStage(
            "custom", K.SECURITY, lambda root: SecurityReport(has_lockfile=True)
        )
        workspace = Workspace()
        workspace.put(K.CLONE_PATH, tmp_path)

        await stage.execute(view_for(workspace, stage), make_context())

        report = workspace.get(K.SECURITY)
        assert isinstance(report, SecurityReport)
        assert report.has_lockfile is True


class TestMetricsStage:
    async def test_aggregates_analysis_outputs(self) -> None:
        workspace = Workspace()
        workspace.put(K.FILE_COUNT, 7)
        workspace.put(K.STATIC_ANALYSIS, StaticAnalysis(total_lines=40))
        workspace.put(K.CODE_STRUCTURE, CodeStructure(functions=3))
        workspace.put(K.TEST_ANALYSIS, TestAnalysis(test_files=["test_a.py"]))
        workspace.put(K.DOCUMENTATION, DocumentationReport())
        workspace.put(K.SECURITY, SecurityReport())
        stage = MetricsStage()

        await stage.execute(view_for(workspace, stage), make_context())

        metrics = workspace.get(K.METRICS)
        assert isinstance(metrics, Metrics)
        assert metrics.total_files == 7
        assert metrics.total_lines == 40
        assert metrics.functions == 3
        assert metrics.test_files == 1
