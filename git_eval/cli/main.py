"""CLI entrypoint for git-eval — typer app with evaluate, status, report and profile."""

import asyncio
import logging
import sys
from pathlib import Path

import structlog
import typer

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.artifact.domain.key import CacheKey
from git_eval.cli.output import print_evaluation, print_job, print_profile
from git_eval.cli.runtime import open_runtime
from git_eval.config.domain.config import EvalConfig
from git_eval.config.domain.pipeline import PipelineMode
from git_eval.config.infrastructure.observer import StructlogConfigObserver
from git_eval.config.infrastructure.yaml_loader import YamlConfigLoader
from git_eval.core.errors import ArtifactStoreError, GitEvalError
from git_eval.job.domain.job import JobKind, JobStatusView
from git_eval.pipeline.application.builder import build_pipeline
from git_eval.pipeline.domain.context import RepositoryJobPayload
from git_eval.pipeline.domain.observer import PipelineObserver
from git_eval.pipeline.infrastructure.composite_observer import (
    CompositePipelineObserver,
)
from git_eval.pipeline.infrastructure.observer import StructlogPipelineObserver
from git_eval.pipeline.infrastructure.progress_observer import ProgressPipelineObserver
from git_eval.profile.application.aggregator import (
    ProfileAggregator,
    UserProfileJobPayload,
)
from git_eval.profile.domain.profile import UserProfile
from git_eval.profile.infrastructure.observer import StructlogProfileObserver
from git_eval.source.domain.url import parse_repository_url, repository_url

app = typer.Typer(add_completion=False)

_CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Path to a git-eval config YAML"
)
_LOG_FORMAT_OPTION = typer.Option(
    "console", "--log-format", help="Log format: 'console' or 'json'"
)
_LOG_LEVEL_OPTION = typer.Option("info", "--log-level", help="Minimum log level")


def _configure_structlog(log_format: str, log_level: str = "info") -> None:
    """Configure structlog based on the requested format and level."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    level = logging.getLevelNamesMapping().get(log_level.upper())
    if level is None:
        typer.echo(f"Invalid log level: {log_level!r}.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _load_config(config_path: Path | None) -> EvalConfig:
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _pipeline_observer(log_format: str) -> PipelineObserver:
    observers: list[PipelineObserver] = [StructlogPipelineObserver()]
    if log_format != "json":
        observers.append(ProgressPipelineObserver())
    return CompositePipelineObserver(observers=observers)


async def _evaluate(
    config: EvalConfig, target: str, force: bool, log_format: str
) -> Evaluation:
    ref = parse_repository_url(target)
    async with open_runtime(config) as runtime:
        pipeline = build_pipeline(
            config=config.pipeline,
            collaborators=runtime.collaborators,
            coordinator=runtime.coordinator,
            job_store=runtime.store,
            observer=_pipeline_observer(log_format),
        )
        payload = RepositoryJobPayload(
            owner=ref.owner,
            repo=ref.name,
            repository_url=repository_url(ref),
            force=force,
        )
        job = await runtime.store.create_job(JobKind.REPOSITORY, payload.model_dump())
        typer.echo(f"Job {job.id}")
        record = await pipeline.run(job.id)

        evaluation = await runtime.store.get_artifact(record.result_id or "")
        if evaluation is None:
            raise ArtifactStoreError(
                operation="read", reason=f"artifact {record.result_id!r} is missing"
            )
        return evaluation


async def _status(config: EvalConfig, job_id: str) -> JobStatusView | None:
    async with open_runtime(config) as runtime:
        job = await runtime.store.get_job(job_id)
        return JobStatusView.from_record(job) if job is not None else None


async def _report(config: EvalConfig, owner: str, repo: str) -> Evaluation | None:
    async with open_runtime(config) as runtime:
        version = await runtime.github.resolve_version(owner, repo)
        return await runtime.coordinator.lookup(
            CacheKey(owner=owner, name=repo, version=version)
        )


async def _profile(config: EvalConfig, username: str) -> UserProfile | None:
    async with open_runtime(config) as runtime:
        aggregator = ProfileAggregator(
            metadata_provider=runtime.github,
            version_resolver=runtime.github,
            coordinator=runtime.coordinator,
            profile_store=runtime.store,
            job_store=runtime.store,
            observer=StructlogProfileObserver(),
        )
        payload = UserProfileJobPayload(username=username)
        job = await runtime.store.create_job(JobKind.USER_PROFILE, payload.model_dump())
        typer.echo(f"Job {job.id}")
        await aggregator.run(job.id)
        return await runtime.store.get_profile(username)


def _fail(message: str) -> None:
    typer.echo(message)
    sys.exit(1)


@app.command()
def evaluate(
    target: str = typer.Argument(..., help="Repository URL or owner/name"),
    config_path: Path | None = _CONFIG_OPTION,
    sequential: bool = typer.Option(
        False, "--sequential", help="Run one stage at a time"
    ),
    force: bool = typer.Option(
        False, "--force", help="Re-evaluate even if a cached evaluation exists"
    ),
    log_format: str = _LOG_FORMAT_OPTION,
    log_level: str = _LOG_LEVEL_OPTION,
) -> None:
    """Evaluate a repository at its current default-branch commit."""
    _configure_structlog(log_format=log_format, log_level=log_level)
    try:
        config = _load_config(config_path)
        if sequential:
            config = config.model_copy(
                update={
                    "pipeline": config.pipeline.model_copy(
                        update={"mode": PipelineMode.SEQUENTIAL}
                    )
                }
            )
        evaluation = asyncio.run(
            _evaluate(config=config, target=target, force=force, log_format=log_format)
        )
        print_evaluation(evaluation)
    except KeyboardInterrupt:
        _fail("Evaluation interrupted.")
    except GitEvalError as exc:
        _fail(str(exc))
    except Exception as exc:  # noqa: BLE001
        _fail(f"Unexpected error: {exc}\nPlease report this bug.")


@app.command()
def status(
    job_id: str = typer.Argument(..., help="Job ID printed by evaluate or profile"),
    config_path: Path | None = _CONFIG_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
) -> None:
    """Show the status of a job."""
    _configure_structlog(log_format=log_format, log_level="warning")
    try:
        view = asyncio.run(_status(config=_load_config(config_path), job_id=job_id))
    except GitEvalError as exc:
        _fail(str(exc))
        return
    if view is None:
        _fail(f"Failed to find job {job_id!r}")
        return
    print_job(view)


@app.command()
def report(
    owner: str = typer.Argument(..., help="Repository owner"),
    repo: str = typer.Argument(..., help="Repository name"),
    config_path: Path | None = _CONFIG_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
) -> None:
    """Show the stored evaluation of a repository at its current commit."""
    _configure_structlog(log_format=log_format, log_level="warning")
    try:
        evaluation = asyncio.run(
            _report(config=_load_config(config_path), owner=owner, repo=repo)
        )
    except GitEvalError as exc:
        _fail(str(exc))
        return
    if evaluation is None:
        _fail(
            f"No evaluation of {owner}/{repo} at its current commit."
            f" Run `git-eval evaluate {owner}/{repo}` first."
        )
        return
    print_evaluation(evaluation)


@app.command()
def profile(
    username: str = typer.Argument(..., help="GitHub username"),
    config_path: Path | None = _CONFIG_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
    log_level: str = _LOG_LEVEL_OPTION,
) -> None:
    """Aggregate a user's evaluated public repositories into a profile."""
    _configure_structlog(log_format=log_format, log_level=log_level)
    try:
        user_profile = asyncio.run(
            _profile(config=_load_config(config_path), username=username)
        )
    except GitEvalError as exc:
        _fail(str(exc))
        return
    if user_profile is None:
        _fail(f"Failed to read the stored profile of {username!r}")
        return
    print_profile(user_profile)


if __name__ == "__main__":
    app()
