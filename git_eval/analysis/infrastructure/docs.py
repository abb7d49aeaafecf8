"""Documentation heuristics: README, comment ratio, API docs, auxiliary docs."""

import re
from pathlib import Path

from git_eval.analysis.domain.results import DocumentationReport, ReadmeReport
from git_eval.analysis.infrastructure.files import SOURCE_SUFFIXES, iter_files, read_text

_README_NAMES: tuple[str, ...] = ("README.md", "README.rst", "README.txt", "README")
_README_EXCERPT = 2000
_COMMENT_SAMPLE = 100
_COMMENT_PREFIXES: tuple[str, ...] = ("//", "/*", "*", "#", '"""', "'''")
_API_DOC_PATHS: tuple[str, ...] = (
    "docs/api",
    "docs/reference",
    "API.md",
    "api.md",
    "openapi.yaml",
    "openapi.json",
)
_DOC_DIRS: tuple[str, ...] = ("docs", "documentation")
_ADDITIONAL_DOCS: tuple[str, ...] = (
    "CONTRIBUTING.md",
    "CHANGELOG.md",
    "LICENSE",
    "LICENSE.md",
    "CODE_OF_CONDUCT.md",
    "SECURITY.md",
)

_HEADING = re.compile(r"^#{1,3}\s+(.+?)\s*$", re.MULTILINE)
_INSTALLATION = re.compile(r"install|setup|getting started", re.IGNORECASE)
_USAGE = re.compile(r"usage|example|how to use", re.IGNORECASE)


def scan_documentation(root: Path) -> DocumentationReport:
    readme_text = _find_readme(root)
    comment_lines, total_lines = count_comment_lines(root)
    return DocumentationReport(
        readme=analyze_readme(readme_text),
        readme_excerpt=readme_text[:_README_EXCERPT] if readme_text else None,
        comment_lines=comment_lines,
        comment_ratio=round(comment_lines / total_lines, 3) if total_lines else 0.0,
        has_api_docs=any((root / p).exists() for p in (*_API_DOC_PATHS, *_DOC_DIRS)),
        additional_docs=[name for name in _ADDITIONAL_DOCS if (root / name).is_file()],
    )


def analyze_readme(text: str | None) -> ReadmeReport:
    if text is None:
        return ReadmeReport()
    return ReadmeReport(
        exists=True,
        length=len(text),
        sections=_HEADING.findall(text),
        has_installation=bool(_INSTALLATION.search(text)),
        has_usage=bool(_USAGE.search(text)),
        has_code_blocks="```" in text,
    )


def count_comment_lines(root: Path) -> tuple[int, int]:
    """Return (comment lines, total lines) over a sample of source files."""
    comments = total = 0
    for path in iter_files(root, suffixes=SOURCE_SUFFIXES, limit=_COMMENT_SAMPLE):
        text = read_text(path)
        if text is None:
            continue
        for line in text.splitlines():
            total += 1
            if line.lstrip().startswith(_COMMENT_PREFIXES):
                comments += 1
    return comments, total


def _find_readme(root: Path) -> str | None:
    for name in _README_NAMES:
        candidate = root / name
        if candidate.is_file():
            return read_text(candidate)
    return None
