"""Code structure heuristics: complexity estimate, definitions, dependencies."""

import json
import re
import tomllib
from pathlib import Path

from git_eval.analysis.domain.results import CodeStructure, Complexity
from git_eval.analysis.infrastructure.files import SOURCE_SUFFIXES, iter_files, read_text

_COMPLEXITY_SAMPLE = 50
_DEFINITION_SAMPLE = 100
_DEPENDENCY_LIMIT = 20

# Each match adds one decision point to a file's cyclomatic estimate.
_BRANCH_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bif\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\b(?:catch|except)\b"),
    re.compile(r"&&|\|\||\band\b|\bor\b"),
    re.compile(r"\?\s*[^:\s]"),
)
_FUNCTION_PATTERN = re.compile(
    r"\bfunction\s+\w+|\bdef\s+\w+|\bfunc\s+\w+|\bfn\s+\w+|\bconst\s+\w+\s*=\s*(?:async\s*)?\("
)
_CLASS_PATTERN = re.compile(r"\b(?:class|struct|interface)\s+\w+")
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def parse_code(root: Path) -> CodeStructure:
    return CodeStructure(
        complexity=estimate_complexity(root),
        **count_definitions(root),
        dependencies=declared_dependencies(root),
    )


def file_complexity(text: str) -> int:
    return 1 + sum(len(pattern.findall(text)) for pattern in _BRANCH_PATTERNS)


def estimate_complexity(root: Path) -> Complexity:
    distribution = {"simple": 0, "moderate": 0, "complex": 0}
    scores: list[int] = []
    for path in iter_files(root, suffixes=SOURCE_SUFFIXES, limit=_COMPLEXITY_SAMPLE):
        text = read_text(path)
        if text is None:
            continue
        score = file_complexity(text)
        scores.append(score)
        if score < 5:
            distribution["simple"] += 1
        elif score < 10:
            distribution["moderate"] += 1
        else:
            distribution["complex"] += 1

    if not scores:
        return Complexity()
    return Complexity(
        average=round(sum(scores) / len(scores), 1),
        max=max(scores),
        distribution=distribution,
    )


def count_definitions(root: Path) -> dict[str, int]:
    functions = classes = 0
    for path in iter_files(root, suffixes=SOURCE_SUFFIXES, limit=_DEFINITION_SAMPLE):
        text = read_text(path)
        if text is None:
            continue
        functions += len(_FUNCTION_PATTERN.findall(text))
        classes += len(_CLASS_PATTERN.findall(text))
    return {"functions": functions, "classes": classes}


def declared_dependencies(root: Path) -> list[str]:
    """Names from the first manifest found: package.json, pyproject.toml, requirements.txt."""
    package_json = root / "package.json"
    if package_json.is_file():
        try:
            manifest = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            manifest = {}
        if isinstance(manifest, dict):
            names = [
                *(manifest.get("dependencies") or {}),
                *(manifest.get("devDependencies") or {}),
            ]
            return names[:_DEPENDENCY_LIMIT]

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            project = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {})
        except (OSError, tomllib.TOMLDecodeError):
            project = {}
        requirements = [
            match.group(1)
            for line in project.get("dependencies", [])
            if (match := _REQUIREMENT_NAME.match(line))
        ]
        if requirements:
            return requirements[:_DEPENDENCY_LIMIT]

    requirements_txt = root / "requirements.txt"
    if requirements_txt.is_file():
        text = read_text(requirements_txt) or ""
        names = [
            match.group(1)
            for line in text.splitlines()
            if not line.lstrip().startswith(("#", "-"))
            and (match := _REQUIREMENT_NAME.match(line))
        ]
        return names[:_DEPENDENCY_LIMIT]

    return []
