"""build_pipeline — wires collaborators into stages and stages into a plan."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from git_eval.cache.application.coordinator import CacheCoordinator
from git_eval.config.domain.pipeline import PipelineConfig, PipelineMode
from git_eval.job.domain.store import JobStore
from git_eval.pipeline.application.orchestrator import PipelineOrchestrator
from git_eval.pipeline.domain.observer import PipelineObserver
from git_eval.pipeline.domain.plan import PipelinePlan
from git_eval.pipeline.stages.analysis import analysis_stages
from git_eval.pipeline.stages.assembly import ReportAssemblyStage
from git_eval.pipeline.stages.cache_check import CacheCheckStage
from git_eval.pipeline.stages.cache_storage import CacheStorageStage
from git_eval.pipeline.stages.cleanup import CleanupStage
from git_eval.pipeline.stages.diagram import ArchitectureDiagramStage
from git_eval.pipeline.stages.fetch import FetchStage
from git_eval.pipeline.stages.metrics import MetricsStage
from git_eval.pipeline.stages.scoring import ScoringStage
from git_eval.pipeline.stages.visualization import VisualizationStage
from git_eval.scoring.domain.scorer import DiagramGenerator, Scorer
from git_eval.source.domain.provider import (
    ContentProvider,
    MetadataProvider,
    VersionResolver,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class PipelineCollaborators:
    """The external services a pipeline run talks to."""

    version_resolver: VersionResolver
    metadata_provider: MetadataProvider
    content_provider: ContentProvider
    scorer: Scorer
    diagram_generator: DiagramGenerator


def build_plan(
    mode: PipelineMode,
    collaborators: PipelineCollaborators,
    coordinator: CacheCoordinator,
    scratch_dir: Path,
    clock: Callable[[], datetime] = _utcnow,
) -> PipelinePlan:
    """Build the fourteen-stage plan in the requested execution mode.

    Both modes contain the same stages with the same read/write declarations;
    only the grouping and the progress checkpoints differ.
    """
    cache_check = CacheCheckStage(collaborators.version_resolver, coordinator)
    fetch = FetchStage(
        collaborators.metadata_provider, collaborators.content_provider, scratch_dir
    )
    analysis = analysis_stages()
    metrics = MetricsStage()
    reporting = [
        ScoringStage(collaborators.scorer),
        ArchitectureDiagramStage(collaborators.diagram_generator),
        VisualizationStage(),
    ]
    assembly = ReportAssemblyStage(clock=clock)
    cache_write = CacheStorageStage(coordinator)
    cleanup = CleanupStage()

    if mode is PipelineMode.SEQUENTIAL:
        return PipelinePlan.sequential(
            [
                cache_check,
                fetch,
                *analysis,
                metrics,
                *reporting,
                assembly,
                cache_write,
                cleanup,
            ]
        )
    return PipelinePlan.optimized(
        cache_check=cache_check,
        fetch=fetch,
        analysis=analysis,
        metrics=metrics,
        reporting=reporting,
        assembly=assembly,
        cache_write=cache_write,
        cleanup=cleanup,
    )


def build_pipeline(
    config: PipelineConfig,
    collaborators: PipelineCollaborators,
    coordinator: CacheCoordinator,
    job_store: JobStore,
    observer: PipelineObserver,
    clock: Callable[[], datetime] = _utcnow,
) -> PipelineOrchestrator:
    plan = build_plan(
        config.mode,
        collaborators,
        coordinator,
        scratch_dir=config.scratch_dir,
        clock=clock,
    )
    return PipelineOrchestrator(plan=plan, job_store=job_store, observer=observer)
