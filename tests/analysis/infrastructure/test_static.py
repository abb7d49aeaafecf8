"""Tests for static analysis of a repository tree."""

from pathlib import Path

from git_eval.analysis.infrastructure.static import (
    analyze_static,
    build_file_structure,
    identify_project_type,
)


class TestAnalyzeStatic:
    def test_counts_lines_per_language(self, repository: Path) -> None:
        result = analyze_static(repository)

        assert result.lines_by_language == {"Python": 11, "JavaScript": 3}
        assert result.total_lines == 14

    def test_vendored_files_are_ignored(self, repository: Path) -> None:
        result = analyze_static(repository)

        assert set(result.languages) == {"Python", "JavaScript"}
        assert not any(
            e.path.startswith(("node_modules", ".git")) for e in result.file_structure
        )

    def test_project_type(self, repository: Path) -> None:
        assert analyze_static(repository).project_type == "Python"


class TestProjectType:
    def test_first_marker_wins(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        (tmp_path / "requirements.txt").write_text("", encoding="utf-8")
        assert identify_project_type(tmp_path) == "Node.js/JavaScript"

    def test_unknown(self, tmp_path: Path) -> None:
        assert identify_project_type(tmp_path) == "unknown"


class TestFileStructure:
    def test_depth_is_limited(self, tmp_path: Path) -> None:
        deep = tmp_path / "a" / "b" / "c" / "d"
        deep.mkdir(parents=True)
        (deep / "too-deep.txt").write_text("", encoding="utf-8")

        paths = [e.path for e in build_file_structure(tmp_path)]

        assert paths == ["a", "a/b", "a/b/c"]

    def test_directories_are_flagged(self, repository: Path) -> None:
        entries = {e.path: e.is_dir for e in build_file_structure(repository)}
        assert entries["hello"] is True
        assert entries["hello/core.py"] is False
