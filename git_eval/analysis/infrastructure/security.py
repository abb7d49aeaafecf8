"""Security heuristics: hardcoded secrets, risky code patterns, lockfiles."""

import re
from pathlib import Path

from git_eval.analysis.domain.results import CodeIssue, SecretFinding, SecurityReport
from git_eval.analysis.infrastructure.files import iter_files, read_text, relative

_SECRET_SAMPLE = 200
_ISSUE_SAMPLE = 100

_SECRET_SUFFIXES: frozenset[str] = frozenset(
    {".js", ".ts", ".py", ".go", ".rb", ".java", ".yml", ".yaml", ".json", ".toml"}
)
_ISSUE_SUFFIXES: frozenset[str] = frozenset({".js", ".jsx", ".ts", ".tsx", ".py"})

_SECRET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("AWS Access Key", re.compile(r"AKIA[0-9A-Z]{16}")),
    ("Private Key", re.compile(r"-----BEGIN (?:RSA |EC |OPENSSH )?PRIVATE KEY-----")),
    ("API Key", re.compile(r"api[_-]?key[\"'\s:=]+[A-Za-z0-9_\-]{20,}", re.IGNORECASE)),
    ("Secret", re.compile(r"secret[\"'\s:=]+[A-Za-z0-9_\-]{20,}", re.IGNORECASE)),
    ("Token", re.compile(r"token[\"'\s:=]+[A-Za-z0-9_\-]{20,}", re.IGNORECASE)),
    ("Password", re.compile(r"password[\"'\s:=]+[^\s\"']{8,}", re.IGNORECASE)),
)

_ISSUE_PATTERNS: tuple[tuple[str, str, re.Pattern[str]], ...] = (
    (
        "SQL built by string concatenation",
        "high",
        re.compile(r"(?:execute|query)\s*\(\s*[\"'].*[\"']\s*\+", re.IGNORECASE),
    ),
    ("Dynamic code evaluation", "high", re.compile(r"\beval\s*\(|\bexec\s*\(")),
    ("Shell command execution", "medium", re.compile(r"shell\s*=\s*True|child_process")),
    ("Unescaped HTML injection", "medium", re.compile(r"innerHTML|dangerouslySetInnerHTML")),
    ("Insecure randomness", "low", re.compile(r"Math\.random\(\)")),
)

_LOCKFILES: tuple[str, ...] = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "Cargo.lock",
    "go.sum",
    "Gemfile.lock",
    "composer.lock",
)


def scan_security(root: Path) -> SecurityReport:
    return SecurityReport(
        secrets=find_secrets(root),
        issues=find_code_issues(root),
        has_lockfile=any((root / name).is_file() for name in _LOCKFILES),
    )


def find_secrets(root: Path) -> list[SecretFinding]:
    """Report the location and kind of each suspected secret, never its value."""
    findings: list[SecretFinding] = []
    for path in iter_files(root, suffixes=_SECRET_SUFFIXES, limit=_SECRET_SAMPLE):
        text = read_text(path)
        if text is None:
            continue
        for line_number, line in enumerate(text.splitlines(), start=1):
            for kind, pattern in _SECRET_PATTERNS:
                if pattern.search(line):
                    findings.append(
                        SecretFinding(file=relative(root, path), kind=kind, line=line_number)
                    )
                    break
    return findings


def find_code_issues(root: Path) -> list[CodeIssue]:
    issues: list[CodeIssue] = []
    for path in iter_files(root, suffixes=_ISSUE_SUFFIXES, limit=_ISSUE_SAMPLE):
        text = read_text(path)
        if text is None:
            continue
        for issue, severity, pattern in _ISSUE_PATTERNS:
            if pattern.search(text):
                issues.append(
                    CodeIssue(file=relative(root, path), issue=issue, severity=severity)
                )
    return issues
