"""Tests for test-suite heuristics."""

from pathlib import Path

import pytest

from git_eval.analysis.infrastructure.testing import (
    analyze_tests,
    estimate_coverage,
    is_test_file,
)


class TestIsTestFile:
    @pytest.mark.parametrize(
        "relative_path",
        [
            "test_core.py",
            "core_test.go",
            "src/app.test.ts",
            "src/app.spec.jsx",
            "src/GreeterTest.java",
            "__tests__/app.js",
            "spec/models/user_spec.rb",
        ],
    )
    def test_recognized(self, tmp_path: Path, relative_path: str) -> None:
        assert is_test_file(tmp_path, tmp_path / relative_path)

    @pytest.mark.parametrize("relative_path", ["core.py", "tests/fixture.json"])
    def test_not_recognized(self, tmp_path: Path, relative_path: str) -> None:
        assert not is_test_file(tmp_path, tmp_path / relative_path)


class TestAnalyzeTests:
    def test_repository(self, repository: Path) -> None:
        result = analyze_tests(repository)

        assert result.test_files == ["tests/test_core.py"]
        assert result.assertions == 2
        assert result.assertions_per_file == 2.0
        assert result.frameworks == ["Pytest"]

    def test_empty_repository(self, tmp_path: Path) -> None:
        result = analyze_tests(tmp_path)

        assert result.test_files == []
        assert result.coverage_estimate == 0


class TestEstimateCoverage:
    def test_no_source_files(self) -> None:
        assert estimate_coverage(test_files=3, source_files=0) == 0

    def test_scaled_by_files_per_test(self) -> None:
        assert estimate_coverage(test_files=1, source_files=10) == 25

    def test_capped_at_100(self) -> None:
        assert estimate_coverage(test_files=10, source_files=2) == 100
