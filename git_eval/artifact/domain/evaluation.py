"""Evaluation — the cached artifact produced by a full pipeline run."""

from datetime import datetime

from pydantic import BaseModel, Field

from git_eval.analysis.domain.results import Metrics
from git_eval.artifact.domain.key import CacheKey
from git_eval.scoring.domain.score import CategoryScore, Grade, Suggestion
from git_eval.source.domain.metadata import RepositoryMetadata


class ChartPoint(BaseModel, frozen=True):
    label: str
    value: float
    max_value: float | None = None
    percentage: float | None = None


class Chart(BaseModel, frozen=True):
    type: str
    title: str
    data: list[ChartPoint] = Field(default_factory=list)
    color: str | None = None


class Visualizations(BaseModel, frozen=True):
    language_chart: Chart | None = None
    coverage_chart: Chart | None = None
    complexity_chart: Chart | None = None
    category_chart: Chart | None = None


class Evaluation(BaseModel, frozen=True):
    """Final report plus the key fields needed to serve it without re-running.

    ``id`` is empty until the artifact store assigns one. ``cached`` is True
    whenever the evaluation is served from either store.
    """

    id: str = ""
    repository_url: str
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    commit_sha: str = Field(min_length=1)

    overall_score: float = Field(ge=0, le=100)
    grade: Grade
    code_quality_score: float = Field(ge=0, le=60)
    product_quality_score: float = Field(ge=0, le=40)

    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    category_scores: list[CategoryScore] = Field(default_factory=list)

    architecture_diagram: str = ""
    metrics: Metrics = Field(default_factory=Metrics)
    metadata: RepositoryMetadata = Field(default_factory=RepositoryMetadata)
    visualizations: Visualizations = Field(default_factory=Visualizations)

    evaluated_at: datetime
    cached: bool = False

    @property
    def key(self) -> CacheKey:
        return CacheKey(owner=self.owner, name=self.repo, version=self.commit_sha)
