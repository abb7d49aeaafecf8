"""Filesystem helpers shared by the repository analyzers."""

import os
from collections.abc import Iterator
from pathlib import Path

IGNORED_DIRS: frozenset[str] = frozenset(
    {".git", "node_modules", "vendor", "dist", "build", "__pycache__", ".venv", "venv"}
)

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".kt": "Kotlin",
    ".go": "Go",
    ".rb": "Ruby",
    ".php": "PHP",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".hpp": "C++",
    ".cs": "C#",
    ".rs": "Rust",
    ".swift": "Swift",
    ".scala": "Scala",
}

SOURCE_SUFFIXES: frozenset[str] = frozenset(LANGUAGE_BY_SUFFIX)


def iter_files(
    root: Path,
    suffixes: frozenset[str] | None = None,
    limit: int | None = None,
) -> Iterator[Path]:
    """Yield files below *root* in a stable order, skipping vendored and VCS dirs."""
    yielded = 0
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if suffixes is not None and path.suffix.lower() not in suffixes:
                continue
            if not path.is_file():
                continue
            yield path
            yielded += 1
            if limit is not None and yielded >= limit:
                return


def read_text(path: Path) -> str | None:
    """Return the file's text, or None for binary or unreadable files."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def relative(root: Path, path: Path) -> str:
    return path.relative_to(root).as_posix()
