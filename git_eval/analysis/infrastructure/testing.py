"""Test-suite heuristics: test files, frameworks, assertion density, coverage estimate."""

import re
from pathlib import Path

from git_eval.analysis.domain.results import TestAnalysis
from git_eval.analysis.infrastructure.files import (
    SOURCE_SUFFIXES,
    iter_files,
    read_text,
    relative,
)

_ASSERTION_SAMPLE = 50
# Each test file is assumed to exercise roughly this many source files.
_FILES_COVERED_PER_TEST = 2.5

_TEST_FILE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r".+\.(?:test|spec)\.[jt]sx?$"),
    re.compile(r"^test_.+\.py$"),
    re.compile(r".+_test\.(?:py|go)$"),
    re.compile(r".+Tests?\.(?:java|kt|cs)$"),
    re.compile(r".+_spec\.rb$"),
)
_TEST_DIRS: frozenset[str] = frozenset({"__tests__", "tests", "test", "spec"})
_ASSERTION_PATTERN = re.compile(
    r"\bexpect\s*\(|\bassert\w*|\.should\.|\.to(?:Be|Equal|HaveBeenCalled)\w*\("
)

_FRAMEWORK_MARKERS: dict[str, str] = {
    "jest": "Jest",
    "mocha": "Mocha",
    "jasmine": "Jasmine",
    "vitest": "Vitest",
    "cypress": "Cypress",
    "playwright": "Playwright",
    "pytest": "Pytest",
    "unittest": "unittest",
    "hypothesis": "Hypothesis",
    "rspec": "RSpec",
    "junit": "JUnit",
}
_MANIFESTS: tuple[str, ...] = (
    "package.json",
    "pyproject.toml",
    "requirements.txt",
    "requirements-dev.txt",
    "setup.cfg",
    "Gemfile",
    "pom.xml",
    "build.gradle",
)


def is_test_file(root: Path, path: Path) -> bool:
    if path.suffix.lower() not in SOURCE_SUFFIXES:
        return False
    if any(pattern.match(path.name) for pattern in _TEST_FILE_PATTERNS):
        return True
    return any(part in _TEST_DIRS for part in path.relative_to(root).parts[:-1])


def analyze_tests(root: Path) -> TestAnalysis:
    test_files: list[Path] = []
    source_files = 0
    for path in iter_files(root, suffixes=SOURCE_SUFFIXES):
        if is_test_file(root, path):
            test_files.append(path)
        else:
            source_files += 1

    assertions = 0
    sampled = 0
    for path in test_files[:_ASSERTION_SAMPLE]:
        text = read_text(path)
        if text is None:
            continue
        assertions += len(_ASSERTION_PATTERN.findall(text))
        sampled += 1

    return TestAnalysis(
        test_files=[relative(root, p) for p in test_files],
        frameworks=identify_frameworks(root),
        assertions=assertions,
        assertions_per_file=round(assertions / sampled, 1) if sampled else 0.0,
        coverage_estimate=estimate_coverage(len(test_files), source_files),
    )


def estimate_coverage(test_files: int, source_files: int) -> int:
    if source_files == 0:
        return 0
    return round(min(100.0, test_files * _FILES_COVERED_PER_TEST / source_files * 100))


def identify_frameworks(root: Path) -> list[str]:
    manifest_text = "\n".join(
        text
        for name in _MANIFESTS
        if (root / name).is_file() and (text := read_text(root / name)) is not None
    ).lower()
    return [
        framework
        for marker, framework in _FRAMEWORK_MARKERS.items()
        if marker in manifest_text
    ]
