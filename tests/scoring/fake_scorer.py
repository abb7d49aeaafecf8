"""FakeScorer / FakeDiagramGenerator — canned scoring collaborators."""

from git_eval.scoring.domain.score import ScoreReport
from git_eval.scoring.domain.scorer import ScoringInput
from tests.artifact.fake_evaluation import make_score_report


class FakeScorer:
    def __init__(
        self, report: ScoreReport | None = None, error: Exception | None = None
    ) -> None:
        self.report = report or make_score_report()
        self.error = error
        self.inputs: list[ScoringInput] = []

    async def score(self, scoring_input: ScoringInput) -> ScoreReport:
        self.inputs.append(scoring_input)
        if self.error is not None:
            raise self.error
        return self.report


class FakeDiagramGenerator:
    def __init__(
        self, diagram: str = "graph TD\n    A --> B", error: Exception | None = None
    ) -> None:
        self.diagram = diagram
        self.error = error

    async def generate_diagram(self, scoring_input: ScoringInput) -> str:
        if self.error is not None:
            raise self.error
        return self.diagram
