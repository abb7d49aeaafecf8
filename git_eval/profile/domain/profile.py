"""UserProfile — aggregate assessment across a user's evaluated repositories."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from git_eval.scoring.domain.score import Grade

type QualityTrend = Literal["improving", "stable", "declining"]


class RepositorySummary(BaseModel, frozen=True):
    owner: str
    repo: str
    score: float = Field(ge=0, le=100)
    grade: Grade
    languages: list[str] = Field(default_factory=list)
    stars: int = Field(default=0, ge=0)
    evaluated_at: datetime


class ConsistencyMetrics(BaseModel, frozen=True):
    average_score: float = Field(ge=0, le=100)
    score_variance: float = Field(ge=0)
    quality_trend: QualityTrend


class UserProfile(BaseModel, frozen=True):
    id: str = ""
    username: str = Field(min_length=1)
    overall_score: float = Field(ge=0, le=100)
    repository_count: int = Field(ge=0)
    evaluated_repository_count: int = Field(ge=0)
    top_repositories: list[RepositorySummary] = Field(default_factory=list)
    consistency: ConsistencyMetrics
    missing_repositories: list[str] = Field(default_factory=list)
    evaluated_at: datetime
