"""Pipeline execution configuration model."""

import tempfile
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field


class PipelineMode(StrEnum):
    SEQUENTIAL = "sequential"
    OPTIMIZED = "optimized"


class PipelineConfig(BaseModel, frozen=True):
    mode: PipelineMode = PipelineMode.OPTIMIZED
    scratch_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "git-eval"
    )
