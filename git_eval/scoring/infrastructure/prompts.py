"""Prompt text for the scoring and diagram LLM calls."""

from git_eval.analysis.domain.results import FileEntry
from git_eval.scoring.domain.scorer import ScoringInput

_README_LIMIT = 2000
_TOP_LANGUAGES = 5
_TOP_DEPENDENCIES = 10
_TREE_ENTRIES = 60
_TREE_DEPTH = 3

SCORING_SYSTEM_PROMPT = """\
You are a senior software engineer evaluating a GitHub repository. Provide an \
objective assessment based on the supplied data and the rubric below. Be \
specific and provide concrete evidence for every score.

# Evaluation Rubric (Total: 100 points)

## Code Quality (60 points)

### Testing (20 points)
- Test coverage (0-10): test-to-code ratio, coverage estimate
- Test quality and assertions (0-5): meaningful tests, good assertions
- Edge case coverage (0-5): error cases, boundary conditions

### Code Organization (15 points)
- Project structure (0-5): logical layout, separation of concerns
- Modularity (0-5): reuse, no duplication
- File organization (0-5): consistent naming, reasonable file sizes

### Documentation (10 points)
- README quality (0-4): setup instructions, usage examples
- Code comments (0-3): meaningful, not excessive
- API documentation (0-3): function docs, type definitions

### Performance (10 points)
- Algorithm efficiency (0-5)
- Scalability considerations (0-5)

### Best Practices (5 points)
- Error handling (0-2)
- Security practices (0-2): input validation, no hardcoded secrets
- CI/CD setup (0-1)

## Product Quality (40 points)

### Problem Novelty (15 points)
- Uniqueness of problem (0-10)
- Innovation in approach (0-5)

### Real-World Utility (15 points)
- Solves a genuine need (0-10)
- Production readiness (0-5)

### Technical Difficulty (10 points)
- Problem complexity (0-5)
- Implementation sophistication (0-5)

## Output Format

Respond with a JSON object containing:
- overall_score: number 0-100, the sum of both category scores
- grade: one of A+, A, A-, B+, B, B-, C+, C, C-, D, F
- category_scores: exactly two entries, "Code Quality" (max_points 60) and \
"Product Quality" (max_points 40), each with criteria (name, score, \
max_points, reasoning, evidence)
- summary: a 2-3 paragraph overview
- strengths: three or more strings
- improvements: three or more strings
- suggestions: list of objects (category, priority high|medium|low, title, \
description, expected_impact, specific_examples)
"""


def build_scoring_prompt(scoring_input: ScoringInput) -> str:
    metadata = scoring_input.metadata
    metrics = scoring_input.metrics

    lines = [
        "# Repository Information",
        f"- Name: {scoring_input.repo_name}",
        f"- Languages: {', '.join(metadata.languages) or 'unknown'}",
        f"- Stars: {metadata.stars}",
    ]
    if metadata.description:
        lines.append(f"- Description: {metadata.description}")

    lines += [
        "",
        "# Code Metrics",
        f"- Project Type: {metrics.project_type}",
        f"- Total Files: {metrics.total_files}",
        f"- Total Lines: {metrics.total_lines}",
        f"- Test Files: {metrics.test_files}",
        f"- Estimated Test Coverage: {metrics.test_coverage}%",
        f"- Test Frameworks: {', '.join(metrics.test_frameworks) or 'none detected'}",
        f"- Average Complexity: {metrics.complexity.average:.2f}",
        f"- Max Complexity: {metrics.complexity.max}",
        f"- Functions: {metrics.functions}, Classes: {metrics.classes}",
        f"- Comment Ratio: {metrics.documentation.comment_ratio:.2%}",
        f"- Hardcoded Secret Findings: {len(metrics.security.secrets)}",
        f"- Risky Code Patterns: {len(metrics.security.issues)}",
        f"- Lockfile Present: {'yes' if metrics.security.has_lockfile else 'no'}",
        "",
        "# Language Distribution (lines)",
    ]
    ranked = sorted(metrics.lines_by_language.items(), key=lambda kv: kv[1], reverse=True)
    lines += [f"- {lang}: {count}" for lang, count in ranked[:_TOP_LANGUAGES]]

    if metrics.dependencies:
        lines += ["", "# Dependencies"]
        lines += [
            f"- {d.name} ({d.version}) - {d.type}"
            for d in metrics.dependencies[:_TOP_DEPENDENCIES]
        ]

    if scoring_input.readme_excerpt:
        lines += ["", "# README Content", scoring_input.readme_excerpt[:_README_LIMIT]]

    return "\n".join(lines)


def build_diagram_prompt(scoring_input: ScoringInput) -> str:
    metadata = scoring_input.metadata
    parts = [
        "You are analyzing a GitHub repository to produce a Mermaid architecture diagram.",
        "",
        f"Repository: {scoring_input.repo_name}",
        f"Languages: {', '.join(metadata.languages) or 'unknown'}",
    ]
    if metadata.description:
        parts.append(f"Description: {metadata.description}")
    parts += [
        "",
        "File Structure:",
        format_file_structure(scoring_input.metrics.file_structure),
        "",
        "Show the major components, the data flow between them, external"
        " dependencies and the technology stack.",
        "Respond ONLY with Mermaid code, no explanation and no code fences.",
        'Start directly with "graph TD" or similar Mermaid syntax.',
    ]
    return "\n".join(parts)


def format_file_structure(entries: list[FileEntry]) -> str:
    shown = [e for e in entries if e.path.count("/") < _TREE_DEPTH][:_TREE_ENTRIES]
    return "\n".join(
        f"{'  ' * e.path.count('/')}{e.path.rsplit('/', 1)[-1]}{'/' if e.is_dir else ''}"
        for e in shown
    )
