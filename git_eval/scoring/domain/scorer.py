"""Scorer and DiagramGenerator Protocols — structural interfaces for LLM collaborators."""

from typing import Protocol

from pydantic import BaseModel

from git_eval.analysis.domain.results import Metrics
from git_eval.scoring.domain.score import ScoreReport
from git_eval.source.domain.metadata import RepositoryMetadata


class ScoringInput(BaseModel, frozen=True):
    owner: str
    repo: str
    metadata: RepositoryMetadata
    metrics: Metrics
    readme_excerpt: str | None = None

    @property
    def repo_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class Scorer(Protocol):
    async def score(self, scoring_input: ScoringInput) -> ScoreReport:
        """Return a structured score for the repository.

        Raises:
            TransientError: rate limit, timeout or upstream failure (retry-eligible).
            MalformedResponseError: the response could not be parsed (fatal).
        """
        ...


class DiagramGenerator(Protocol):
    async def generate_diagram(self, scoring_input: ScoringInput) -> str: ...
