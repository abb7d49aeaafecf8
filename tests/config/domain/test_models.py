"""Tests for validation constraints on config domain models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from git_eval.config.domain.cache import DEFAULT_TTL_SECONDS, CacheConfig
from git_eval.config.domain.config import EvalConfig
from git_eval.config.domain.pipeline import PipelineConfig, PipelineMode
from git_eval.config.domain.scorer import ScorerConfig
from git_eval.config.domain.source import LimitsConfig, SourceConfig
from git_eval.config.domain.storage import StorageConfig


class TestDefaults:
    """Every section has defaults, so an empty document is a valid config."""

    def test_empty_config(self) -> None:
        cfg = EvalConfig.model_validate({})

        assert cfg.source.api_url == "https://api.github.com"
        assert cfg.source.token is None
        assert cfg.limits.max_repo_size_mb == 1024
        assert cfg.limits.max_files == 10000
        assert cfg.cache.ttl_seconds == DEFAULT_TTL_SECONDS == 86400
        assert cfg.storage.path == Path("git-eval.db")
        assert cfg.pipeline.mode is PipelineMode.OPTIMIZED

    def test_default_scratch_dir_is_under_tempdir(self) -> None:
        assert PipelineConfig().scratch_dir.name == "git-eval"


class TestConstraints:
    @pytest.mark.parametrize(
        "build",
        [
            lambda: LimitsConfig(max_repo_size_mb=0),
            lambda: LimitsConfig(max_files=0),
            lambda: LimitsConfig(clone_timeout_seconds=0),
            lambda: CacheConfig(ttl_seconds=0),
            lambda: ScorerConfig(model=""),
            lambda: ScorerConfig(timeout_seconds=-1),
            lambda: SourceConfig(api_url=""),
            lambda: PipelineConfig.model_validate({"mode": "turbo"}),
        ],
    )
    def test_invalid_values_are_rejected(self, build) -> None:  # noqa: ANN001
        with pytest.raises(ValidationError):
            build()

    def test_models_are_frozen(self) -> None:
        cfg = StorageConfig()
        with pytest.raises(ValidationError):
            cfg.path = Path("other.db")  # type: ignore[misc]

    def test_mode_from_string(self) -> None:
        assert PipelineConfig.model_validate({"mode": "sequential"}).mode is (
            PipelineMode.SEQUENTIAL
        )
