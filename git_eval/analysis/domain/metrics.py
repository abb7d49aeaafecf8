"""collect_metrics — fold the per-stage analysis outputs into one Metrics aggregate."""

from git_eval.analysis.domain.results import (
    CodeStructure,
    Dependency,
    DocumentationReport,
    Metrics,
    SecurityReport,
    StaticAnalysis,
    TestAnalysis,
)


def collect_metrics(
    static: StaticAnalysis,
    code: CodeStructure,
    tests: TestAnalysis,
    documentation: DocumentationReport,
    security: SecurityReport,
    file_count: int,
) -> Metrics:
    return Metrics(
        languages=static.languages,
        lines_by_language=static.lines_by_language,
        total_lines=static.total_lines,
        total_files=file_count,
        project_type=static.project_type,
        test_files=len(tests.test_files),
        test_coverage=tests.coverage_estimate,
        test_frameworks=tests.frameworks,
        dependencies=[Dependency(name=name) for name in code.dependencies],
        file_structure=static.file_structure,
        complexity=code.complexity,
        functions=code.functions,
        classes=code.classes,
        documentation=documentation,
        security=security,
    )
