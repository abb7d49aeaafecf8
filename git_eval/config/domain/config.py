"""Top-level EvalConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from git_eval.config.domain.cache import CacheConfig
from git_eval.config.domain.pipeline import PipelineConfig
from git_eval.config.domain.scorer import ScorerConfig
from git_eval.config.domain.source import LimitsConfig, SourceConfig
from git_eval.config.domain.storage import StorageConfig


class EvalConfig(BaseModel, frozen=True):
    """Root configuration aggregate for git-eval.

    Every section has defaults, so an empty YAML document is a valid config.
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
