"""ScoreReport — structured output of the scoring collaborator."""

from typing import Literal

from pydantic import BaseModel, Field

type Grade = Literal["A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D", "F"]

CODE_QUALITY = "Code Quality"
PRODUCT_QUALITY = "Product Quality"

_GRADE_FLOORS: list[tuple[float, Grade]] = [
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (60, "D"),
]


def grade_for(score: float) -> Grade:
    """Map a 0-100 score onto the letter-grade scale."""
    for floor, grade in _GRADE_FLOORS:
        if score >= floor:
            return grade
    return "F"


class Criterion(BaseModel, frozen=True):
    name: str
    score: float = Field(ge=0)
    max_points: int = Field(ge=0)
    reasoning: str = ""
    evidence: list[str] = Field(default_factory=list)


class CategoryScore(BaseModel, frozen=True):
    category: str
    score: float = Field(ge=0)
    max_points: int = Field(gt=0)
    criteria: list[Criterion] = Field(default_factory=list)


class Suggestion(BaseModel, frozen=True):
    category: str
    priority: Literal["high", "medium", "low"]
    title: str
    description: str
    expected_impact: float = Field(default=0.0, ge=0)
    specific_examples: list[str] = Field(default_factory=list)


class ScoreReport(BaseModel, frozen=True):
    """Immutable scored assessment of one repository."""

    overall_score: float = Field(ge=0, le=100)
    grade: Grade
    category_scores: list[CategoryScore] = Field(default_factory=list)
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)

    def category(self, name: str) -> CategoryScore | None:
        return next((c for c in self.category_scores if c.category == name), None)
