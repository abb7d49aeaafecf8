"""Typed outputs of the analysis stages.

Each stage owns exactly one of these models in the Workspace, which keeps the
writes of concurrently-running stages disjoint.
"""

from pydantic import BaseModel, Field


class FileEntry(BaseModel, frozen=True):
    path: str
    is_dir: bool


class StaticAnalysis(BaseModel, frozen=True):
    languages: dict[str, int] = Field(default_factory=dict)
    lines_by_language: dict[str, int] = Field(default_factory=dict)
    total_lines: int = Field(default=0, ge=0)
    file_structure: list[FileEntry] = Field(default_factory=list)
    project_type: str = "unknown"


class Complexity(BaseModel, frozen=True):
    average: float = Field(default=0.0, ge=0.0)
    max: int = Field(default=0, ge=0)
    distribution: dict[str, int] = Field(default_factory=dict)


class CodeStructure(BaseModel, frozen=True):
    complexity: Complexity = Field(default_factory=Complexity)
    functions: int = Field(default=0, ge=0)
    classes: int = Field(default=0, ge=0)
    dependencies: list[str] = Field(default_factory=list)


class TestAnalysis(BaseModel, frozen=True):
    __test__ = False

    test_files: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    assertions: int = Field(default=0, ge=0)
    assertions_per_file: float = Field(default=0.0, ge=0.0)
    coverage_estimate: int = Field(default=0, ge=0, le=100)


class ReadmeReport(BaseModel, frozen=True):
    exists: bool = False
    length: int = Field(default=0, ge=0)
    sections: list[str] = Field(default_factory=list)
    has_installation: bool = False
    has_usage: bool = False
    has_code_blocks: bool = False


class DocumentationReport(BaseModel, frozen=True):
    readme: ReadmeReport = Field(default_factory=ReadmeReport)
    readme_excerpt: str | None = None
    comment_lines: int = Field(default=0, ge=0)
    comment_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    has_api_docs: bool = False
    additional_docs: list[str] = Field(default_factory=list)


class SecretFinding(BaseModel, frozen=True):
    file: str
    kind: str
    line: int = Field(ge=1)


class CodeIssue(BaseModel, frozen=True):
    file: str
    issue: str
    severity: str


class SecurityReport(BaseModel, frozen=True):
    secrets: list[SecretFinding] = Field(default_factory=list)
    issues: list[CodeIssue] = Field(default_factory=list)
    has_lockfile: bool = False


class Dependency(BaseModel, frozen=True):
    name: str
    version: str = "unknown"
    type: str = "production"


class Metrics(BaseModel, frozen=True):
    """Aggregate of every analysis output, handed to the scorer."""

    languages: dict[str, int] = Field(default_factory=dict)
    lines_by_language: dict[str, int] = Field(default_factory=dict)
    total_lines: int = Field(default=0, ge=0)
    total_files: int = Field(default=0, ge=0)
    project_type: str = "unknown"
    test_files: int = Field(default=0, ge=0)
    test_coverage: int = Field(default=0, ge=0, le=100)
    test_frameworks: list[str] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    file_structure: list[FileEntry] = Field(default_factory=list)
    complexity: Complexity = Field(default_factory=Complexity)
    functions: int = Field(default=0, ge=0)
    classes: int = Field(default=0, ge=0)
    documentation: DocumentationReport = Field(default_factory=DocumentationReport)
    security: SecurityReport = Field(default_factory=SecurityReport)
