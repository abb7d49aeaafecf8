"""FileAnalysisStage — the five independent scans over the fetched repository."""

import asyncio
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel

from git_eval.analysis.infrastructure.code import parse_code
from git_eval.analysis.infrastructure.docs import scan_documentation
from git_eval.analysis.infrastructure.security import scan_security
from git_eval.analysis.infrastructure.static import analyze_static
from git_eval.analysis.infrastructure.testing import analyze_tests
from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey

type Analyzer = Callable[[Path], BaseModel]


class FileAnalysisStage:
    """Runs one blocking analyzer over the clone in a worker thread.

    Each instance reads only the clone path and writes exactly one key, so any
    number of them can share a concurrent group.
    """

    policy = FailurePolicy.FATAL
    reads = frozenset({WorkspaceKey.CLONE_PATH})

    def __init__(self, name: str, output: WorkspaceKey, analyzer: Analyzer) -> None:
        self.name = name
        self.writes = frozenset({output})
        self._output = output
        self._analyzer = analyzer

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        clone_path = workspace.require(WorkspaceKey.CLONE_PATH, Path)
        result = await asyncio.to_thread(self._analyzer, clone_path)
        workspace.put(self._output, result)

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        pass


def analysis_stages() -> list[FileAnalysisStage]:
    return [
        FileAnalysisStage("static-analysis", WorkspaceKey.STATIC_ANALYSIS, analyze_static),
        FileAnalysisStage("code-parser", WorkspaceKey.CODE_STRUCTURE, parse_code),
        FileAnalysisStage("test-analyzer", WorkspaceKey.TEST_ANALYSIS, analyze_tests),
        FileAnalysisStage(
            "documentation-scanner", WorkspaceKey.DOCUMENTATION, scan_documentation
        ),
        FileAnalysisStage("security-scanner", WorkspaceKey.SECURITY, scan_security),
    ]
