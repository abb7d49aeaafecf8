"""Static analysis: languages, line counts, file tree and project type."""

import os
from collections import Counter
from pathlib import Path

from git_eval.analysis.domain.results import FileEntry, StaticAnalysis
from git_eval.analysis.infrastructure.files import (
    IGNORED_DIRS,
    LANGUAGE_BY_SUFFIX,
    SOURCE_SUFFIXES,
    iter_files,
    read_text,
    relative,
)

_TREE_DEPTH = 3
_TREE_LIMIT = 100

# Checked in order; the first marker present at the root decides.
_PROJECT_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("package.json",), "Node.js/JavaScript"),
    (("pyproject.toml", "requirements.txt", "setup.py"), "Python"),
    (("pom.xml", "build.gradle", "build.gradle.kts"), "Java"),
    (("go.mod",), "Go"),
    (("Cargo.toml",), "Rust"),
    (("Package.swift",), "Swift"),
    (("Gemfile",), "Ruby"),
    (("composer.json",), "PHP"),
    (("CMakeLists.txt",), "C/C++"),
)


def analyze_static(root: Path) -> StaticAnalysis:
    bytes_by_language: Counter[str] = Counter()
    lines_by_language: Counter[str] = Counter()

    for path in iter_files(root, suffixes=SOURCE_SUFFIXES):
        language = LANGUAGE_BY_SUFFIX[path.suffix.lower()]
        bytes_by_language[language] += path.stat().st_size
        text = read_text(path)
        if text is not None:
            lines_by_language[language] += text.count("\n") + (
                0 if not text or text.endswith("\n") else 1
            )

    return StaticAnalysis(
        languages=dict(bytes_by_language.most_common()),
        lines_by_language=dict(lines_by_language.most_common()),
        total_lines=sum(lines_by_language.values()),
        file_structure=build_file_structure(root),
        project_type=identify_project_type(root),
    )


def build_file_structure(root: Path) -> list[FileEntry]:
    """Breadth-limited listing of the tree down to a fixed depth."""
    entries: list[FileEntry] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        depth = len(current.relative_to(root).parts)
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
        if depth >= _TREE_DEPTH:
            dirnames[:] = []
        for name in dirnames:
            entries.append(FileEntry(path=relative(root, current / name), is_dir=True))
        for name in sorted(filenames):
            entries.append(FileEntry(path=relative(root, current / name), is_dir=False))
        if len(entries) >= _TREE_LIMIT:
            break
    return entries[:_TREE_LIMIT]


def identify_project_type(root: Path) -> str:
    for markers, project_type in _PROJECT_MARKERS:
        if any((root / marker).exists() for marker in markers):
            return project_type
    return "unknown"
