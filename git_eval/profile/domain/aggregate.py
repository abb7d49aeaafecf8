"""build_profile — summarize a user's evaluated repositories."""

import statistics
from datetime import datetime

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.profile.domain.profile import (
    ConsistencyMetrics,
    QualityTrend,
    RepositorySummary,
    UserProfile,
)

TOP_REPOSITORY_COUNT = 5
# Minimum change in mean score between older and newer halves to call a trend.
TREND_THRESHOLD = 5.0


def summarize(evaluation: Evaluation) -> RepositorySummary:
    return RepositorySummary(
        owner=evaluation.owner,
        repo=evaluation.repo,
        score=evaluation.overall_score,
        grade=evaluation.grade,
        languages=evaluation.metadata.languages,
        stars=evaluation.metadata.stars,
        evaluated_at=evaluation.evaluated_at,
    )


def quality_trend(summaries: list[RepositorySummary]) -> QualityTrend:
    """Compare the mean score of the older half of evaluations with the newer half."""
    if len(summaries) < 2:
        return "stable"
    ordered = sorted(summaries, key=lambda s: s.evaluated_at)
    middle = len(ordered) // 2
    older = statistics.fmean(s.score for s in ordered[:middle])
    newer = statistics.fmean(s.score for s in ordered[middle:])
    if newer - older > TREND_THRESHOLD:
        return "improving"
    if older - newer > TREND_THRESHOLD:
        return "declining"
    return "stable"


def build_profile(
    username: str,
    repository_count: int,
    evaluations: list[Evaluation],
    missing: list[str],
    evaluated_at: datetime,
) -> UserProfile:
    summaries = [summarize(e) for e in evaluations]
    scores = [s.score for s in summaries]
    average = round(statistics.fmean(scores), 1) if scores else 0.0
    return UserProfile(
        username=username,
        overall_score=average,
        repository_count=repository_count,
        evaluated_repository_count=len(summaries),
        top_repositories=sorted(summaries, key=lambda s: s.score, reverse=True)[
            :TOP_REPOSITORY_COUNT
        ],
        consistency=ConsistencyMetrics(
            average_score=average,
            score_variance=round(statistics.pvariance(scores), 2) if scores else 0.0,
            quality_trend=quality_trend(summaries),
        ),
        missing_repositories=missing,
        evaluated_at=evaluated_at,
    )
