"""Tests for code-structure heuristics."""

import json
from pathlib import Path

from git_eval.analysis.infrastructure.code import (
    count_definitions,
    declared_dependencies,
    file_complexity,
    parse_code,
)


class TestComplexity:
    def test_straight_line_code(self) -> None:
        assert file_complexity("x = 1\n") == 1

    def test_each_decision_point_counts(self) -> None:
        text = "if a and b:\n    pass\nfor x in y:\n    pass\n"
        assert file_complexity(text) == 4

    def test_repository_estimate(self, repository: Path) -> None:
        complexity = parse_code(repository).complexity

        assert complexity.max >= complexity.average > 0
        assert sum(complexity.distribution.values()) == 4


class TestDefinitions:
    def test_counts_functions_and_classes(self, repository: Path) -> None:
        counts = count_definitions(repository)

        assert counts == {"functions": 3, "classes": 1}


class TestDependencies:
    def test_pyproject(self, repository: Path) -> None:
        assert declared_dependencies(repository) == ["httpx", "pydantic"]

    def test_package_json_takes_precedence(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"dependencies": {"react": "^18"}, "devDependencies": {"jest": "^29"}}),
            encoding="utf-8",
        )
        (tmp_path / "requirements.txt").write_text("flask\n", encoding="utf-8")

        assert declared_dependencies(tmp_path) == ["react", "jest"]

    def test_requirements_txt_skips_comments_and_options(self, tmp_path: Path) -> None:
        (tmp_path / "requirements.txt").write_text(
            "# pinned\n-r base.txt\nflask==3.0\nrequests>=2\n", encoding="utf-8"
        )
        assert declared_dependencies(tmp_path) == ["flask", "requests"]

    def test_malformed_manifest_is_tolerated(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
        assert declared_dependencies(tmp_path) == []

    def test_no_manifest(self, tmp_path: Path) -> None:
        assert declared_dependencies(tmp_path) == []
