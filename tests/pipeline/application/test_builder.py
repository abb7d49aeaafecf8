"""End-to-end runs of the assembled pipeline with fake collaborators."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from git_eval.artifact.domain.key import CacheKey
from git_eval.cache.application.coordinator import CacheCoordinator
from git_eval.cache.infrastructure.memory import InMemoryHotCache
from git_eval.config.domain.pipeline import PipelineConfig, PipelineMode
from git_eval.core.errors import ErrorCode, MalformedResponseError, TooManyFilesError
from git_eval.job.domain.job import JobKind, JobStatus
from git_eval.pipeline.application.builder import (
    PipelineCollaborators,
    build_pipeline,
    build_plan,
)
from git_eval.pipeline.application.orchestrator import PipelineOrchestrator
from git_eval.pipeline.domain.context import RepositoryJobPayload
from tests.artifact.fake_artifact_store import FakeArtifactStore
from tests.artifact.fake_evaluation import make_score_report
from tests.cache.fake_observer import FakeCacheObserver
from tests.job.fake_job_store import FakeJobStore
from tests.pipeline.fake_observer import FakePipelineObserver
from tests.scoring.fake_scorer import FakeDiagramGenerator, FakeScorer
from tests.source.fake_source import (
    FakeContentProvider,
    FakeMetadataProvider,
    FakeVersionResolver,
)

_NOW = datetime(2025, 6, 1, tzinfo=UTC)

_FILES = {
    "README.md": "# Hello\n\n## Usage\n\nRun it.\n",
    "pyproject.toml": '[project]\nname = "hello"\ndependencies = ["httpx"]\n',
    "hello/main.py": "def main():\n    if True:\n        return 1\n",
    "tests/test_main.py": "def test_main():\n    assert True\n",
}

_STAGE_ORDER = [
    "cache-check",
    "fetch",
    "static-analysis",
    "code-parser",
    "test-analyzer",
    "documentation-scanner",
    "security-scanner",
    "metrics",
    "scoring",
    "architecture-diagram",
    "visualization",
    "report-assembly",
    "cache-storage",
    "cleanup",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Harness:
    def __init__(
        self,
        tmp_path: Path,
        mode: PipelineMode = PipelineMode.OPTIMIZED,
        content: FakeContentProvider | None = None,
        diagram: FakeDiagramGenerator | None = None,
        scorer: FakeScorer | None = None,
    ) -> None:
        self.scratch_dir = tmp_path / "scratch"
        self.artifact_store = FakeArtifactStore()
        self.job_store = FakeJobStore()
        self.observer = FakePipelineObserver()
        self.content = content or FakeContentProvider(files=_FILES)
        self.scorer = scorer or FakeScorer()
        self.resolver = FakeVersionResolver(default="sha-1")
        self.coordinator = CacheCoordinator(
            hot_cache=InMemoryHotCache(),
            artifact_store=self.artifact_store,
            observer=FakeCacheObserver(),
        )
        self.pipeline: PipelineOrchestrator = build_pipeline(
            config=PipelineConfig(mode=mode, scratch_dir=self.scratch_dir),
            collaborators=PipelineCollaborators(
                version_resolver=self.resolver,
                metadata_provider=FakeMetadataProvider(),
                content_provider=self.content,
                scorer=self.scorer,
                diagram_generator=diagram or FakeDiagramGenerator(),
            ),
            coordinator=self.coordinator,
            job_store=self.job_store,
            observer=self.observer,
            clock=lambda: _NOW,
        )

    async def submit(self, force: bool = False) -> str:
        payload = RepositoryJobPayload(
            owner="octo",
            repo="hello",
            repository_url="https://github.com/octo/hello",
            force=force,
        )
        job = await self.job_store.create_job(JobKind.REPOSITORY, payload.model_dump())
        return job.id


# ---------------------------------------------------------------------------
# Plan shape
# ---------------------------------------------------------------------------


class TestBuildPlan:
    """Both modes contain the same fourteen stages."""

    @pytest.mark.parametrize("mode", list(PipelineMode))
    def test_stage_order(self, tmp_path: Path, mode: PipelineMode) -> None:
        harness = _Harness(tmp_path)
        plan = build_plan(
            mode,
            PipelineCollaborators(
                version_resolver=FakeVersionResolver(),
                metadata_provider=FakeMetadataProvider(),
                content_provider=FakeContentProvider(),
                scorer=FakeScorer(),
                diagram_generator=FakeDiagramGenerator(),
            ),
            harness.coordinator,
            scratch_dir=tmp_path,
        )
        assert [s.name for s in plan.stages] == _STAGE_ORDER

    def test_optimized_groups(self, tmp_path: Path) -> None:
        harness = _Harness(tmp_path)
        plan = build_plan(
            PipelineMode.OPTIMIZED,
            PipelineCollaborators(
                version_resolver=FakeVersionResolver(),
                metadata_provider=FakeMetadataProvider(),
                content_provider=FakeContentProvider(),
                scorer=FakeScorer(),
                diagram_generator=FakeDiagramGenerator(),
            ),
            harness.coordinator,
            scratch_dir=tmp_path,
        )
        assert [len(g.stages) for g in plan.groups] == [1, 1, 5, 1, 3, 1, 1, 1]


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------


class TestFullRun:
    @pytest.mark.parametrize(
        ("mode", "expected_progress"),
        [
            (PipelineMode.OPTIMIZED, [5, 15, 55, 60, 85, 90, 95, 100]),
            (
                PipelineMode.SEQUENTIAL,
                [7, 14, 21, 28, 35, 42, 50, 57, 64, 71, 78, 85, 92, 100],
            ),
        ],
    )
    async def test_miss_produces_stored_evaluation(
        self, tmp_path: Path, mode: PipelineMode, expected_progress: list[int]
    ) -> None:
        harness = _Harness(tmp_path, mode=mode)
        job_id = await harness.submit()

        record = await harness.pipeline.run(job_id)

        assert record.status == JobStatus.COMPLETED
        assert record.result_id == "artifact-1"
        assert harness.job_store.progress_history == expected_progress

        evaluation = await harness.artifact_store.get_artifact("artifact-1")
        assert evaluation is not None
        assert evaluation.commit_sha == "sha-1"
        assert evaluation.overall_score == 78.0
        assert evaluation.metrics.total_files == 4
        assert evaluation.metrics.test_files == 1
        assert evaluation.metrics.dependencies[0].name == "httpx"
        assert evaluation.visualizations.category_chart is not None
        assert evaluation.evaluated_at == _NOW

    async def test_scratch_is_removed(self, tmp_path: Path) -> None:
        harness = _Harness(tmp_path)

        await harness.pipeline.run(await harness.submit())

        assert not any(d.exists() for d in harness.content.destinations)

    async def test_second_run_is_served_from_cache(self, tmp_path: Path) -> None:
        harness = _Harness(tmp_path)
        await harness.pipeline.run(await harness.submit())

        record = await harness.pipeline.run(await harness.submit())

        assert record.result_id == "artifact-1"
        assert len(harness.content.destinations) == 1
        assert len(harness.scorer.inputs) == 1
        assert harness.observer.runs[-1].name == "cache_hit"

    async def test_forced_run_replaces_stored_evaluation(self, tmp_path: Path) -> None:
        harness = _Harness(tmp_path)
        await harness.pipeline.run(await harness.submit())
        harness.scorer.report = make_score_report(
            code_quality=25.0, product_quality=15.0
        )

        record = await harness.pipeline.run(await harness.submit(force=True))

        assert len(harness.scorer.inputs) == 2
        assert record.result_id == "artifact-1"
        assert len(harness.artifact_store.artifacts) == 1
        stored = await harness.artifact_store.get_artifact("artifact-1")
        assert stored is not None
        assert stored.overall_score == 40.0

        served = await harness.pipeline.run(await harness.submit())
        assert served.result_id == "artifact-1"
        assert len(harness.scorer.inputs) == 2
        cached = await harness.coordinator.lookup(
            CacheKey(owner="octo", name="hello", version="sha-1")
        )
        assert cached is not None
        assert cached.overall_score == 40.0

    async def test_new_version_runs_again_and_keeps_previous_artifact(
        self, tmp_path: Path
    ) -> None:
        harness = _Harness(tmp_path)
        first = await harness.pipeline.run(await harness.submit())
        harness.resolver.default = "sha-2"

        second = await harness.pipeline.run(await harness.submit())

        assert second.status == JobStatus.COMPLETED
        assert second.result_id != first.result_id
        assert len(harness.scorer.inputs) == 2
        assert len(harness.content.destinations) == 2
        assert sorted(e.commit_sha for e in harness.artifact_store.artifacts) == [
            "sha-1",
            "sha-2",
        ]
        previous = await harness.artifact_store.get_artifact(first.result_id or "")
        assert previous is not None
        assert previous.commit_sha == "sha-1"
        assert previous.overall_score == 78.0
        assert harness.content.versions == ["sha-1", "sha-2"]

    async def test_diagram_failure_degrades_to_fallback(self, tmp_path: Path) -> None:
        harness = _Harness(
            tmp_path,
            diagram=FakeDiagramGenerator(
                error=MalformedResponseError(service="LLM", reason="empty")
            ),
        )

        record = await harness.pipeline.run(await harness.submit())

        evaluation = await harness.artifact_store.get_artifact(record.result_id or "")
        assert evaluation is not None
        assert evaluation.architecture_diagram.startswith("graph TD\n    A[hello]")
        assert harness.observer.stage_names("degraded") == ["architecture-diagram"]

    async def test_too_many_files_fails_the_job(self, tmp_path: Path) -> None:
        harness = _Harness(
            tmp_path,
            content=FakeContentProvider(error=TooManyFilesError(file_count=20, limit=10)),
        )
        job_id = await harness.submit()

        with pytest.raises(TooManyFilesError):
            await harness.pipeline.run(job_id)

        job = await harness.job_store.get_job(job_id)
        assert job is not None
        assert job.status == JobStatus.FAILED
        assert job.error_code == ErrorCode.TOO_MANY_FILES
        assert job.retriable is False
        assert job.progress == 5
        assert harness.artifact_store.artifacts == []
        assert not any(d.exists() for d in harness.content.destinations)

    async def test_artifact_readable_through_coordinator(self, tmp_path: Path) -> None:
        harness = _Harness(tmp_path)
        await harness.pipeline.run(await harness.submit())

        cached = await harness.coordinator.lookup(
            CacheKey(owner="octo", name="hello", version="sha-1")
        )

        assert cached is not None
        assert cached.cached is True
