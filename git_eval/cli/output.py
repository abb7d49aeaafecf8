"""Terminal rendering of evaluations, profiles and job status."""

import typer

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.job.domain.job import JobStatusView
from git_eval.profile.domain.profile import UserProfile

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_WHITE = "\033[97m"

_BAR_WIDTH = 20


def _score_color(percentage: float) -> str:
    if percentage >= 80:
        return _GREEN
    if percentage >= 60:
        return _YELLOW
    return _RED


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _header(title: str) -> None:
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  git-eval  ·  {title}{_RESET}")
    _rule(color=_CYAN)
    typer.echo("")


def _rows(rows: list[tuple[str, str]]) -> None:
    label_w = max(len(label) for label, _ in rows)
    for label, value in rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")


def _bar(score: float, max_points: float) -> str:
    percentage = score / max_points * 100 if max_points else 0.0
    filled = round(percentage / 100 * _BAR_WIDTH)
    color = _score_color(percentage)
    return f"{color}{'█' * filled}{_DIM}{'░' * (_BAR_WIDTH - filled)}{_RESET}"


def _bullets(title: str, items: list[str], color: str) -> None:
    if not items:
        return
    typer.echo("")
    typer.echo(f"  {color}{_BOLD}{title}{_RESET}")
    for item in items:
        typer.echo(f"  {_DIM}•{_RESET} {item}")


def print_evaluation(evaluation: Evaluation) -> None:
    _header(f"{evaluation.owner}/{evaluation.repo}")
    color = _score_color(evaluation.overall_score)
    _rows(
        [
            ("Commit", evaluation.commit_sha[:12]),
            ("Evaluated", evaluation.evaluated_at.isoformat(timespec="seconds")),
            ("Served from cache", "yes" if evaluation.cached else "no"),
            ("Artifact ID", evaluation.id),
        ]
    )
    typer.echo("")
    typer.echo(
        f"  {color}{_BOLD}{evaluation.overall_score:.1f}/100  {evaluation.grade}{_RESET}"
    )
    typer.echo(
        f"  {'Code Quality':<16}{evaluation.code_quality_score:>5.1f}/60  "
        f"{_bar(evaluation.code_quality_score, 60)}"
    )
    typer.echo(
        f"  {'Product Quality':<16}{evaluation.product_quality_score:>5.1f}/40  "
        f"{_bar(evaluation.product_quality_score, 40)}"
    )

    if evaluation.summary:
        typer.echo("")
        typer.echo(f"  {evaluation.summary}")
    _bullets("Strengths", evaluation.strengths, _GREEN)
    _bullets("Improvements", evaluation.improvements, _YELLOW)
    typer.echo("")
    _rule(color=_CYAN)


def print_profile(profile: UserProfile) -> None:
    _header(f"Profile  ·  {profile.username}")
    _rows(
        [
            ("Overall score", f"{profile.overall_score:.1f}"),
            (
                "Evaluated",
                f"{profile.evaluated_repository_count} of {profile.repository_count}",
            ),
            ("Score variance", f"{profile.consistency.score_variance:.2f}"),
            ("Quality trend", profile.consistency.quality_trend),
        ]
    )
    if profile.top_repositories:
        typer.echo("")
        typer.echo(f"  {_BOLD}Top repositories{_RESET}")
        for summary in profile.top_repositories:
            color = _score_color(summary.score)
            typer.echo(
                f"  {color}{summary.score:>5.1f} {summary.grade:<2}{_RESET}"
                f"  {summary.owner}/{summary.repo}"
            )
    _bullets("Not evaluated", profile.missing_repositories, _DIM)
    typer.echo("")
    _rule(color=_CYAN)


def print_job(view: JobStatusView) -> None:
    typer.echo(view.model_dump_json(indent=2, exclude_none=True))
