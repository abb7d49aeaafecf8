"""Scorer configuration model."""

from pydantic import BaseModel, Field


class ScorerConfig(BaseModel, frozen=True):
    model: str = Field(default="anthropic/claude-opus-4-5-20251101", min_length=1)
    temperature: float = Field(default=0.3, ge=0.0)
    max_tokens: int = Field(default=8000, ge=1)
    diagram_temperature: float = Field(default=0.5, ge=0.0)
    diagram_max_tokens: int = Field(default=2000, ge=1)
    timeout_seconds: float = Field(default=300.0, gt=0.0)
