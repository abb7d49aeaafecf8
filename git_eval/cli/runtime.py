"""Runtime — the long-lived collaborators one CLI invocation wires together."""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass

from git_eval.artifact.domain.hot_cache import HotCache
from git_eval.cache.application.coordinator import CacheCoordinator
from git_eval.cache.infrastructure.memory import InMemoryHotCache
from git_eval.cache.infrastructure.observer import StructlogCacheObserver
from git_eval.cache.infrastructure.redis_cache import RedisHotCache
from git_eval.config.domain.config import EvalConfig
from git_eval.pipeline.application.builder import PipelineCollaborators
from git_eval.scoring.infrastructure.litellm import LiteLLMScorer
from git_eval.scoring.infrastructure.observer import StructlogScoringObserver
from git_eval.source.infrastructure.git_clone import GitCloneProvider
from git_eval.source.infrastructure.github import GitHubClient
from git_eval.storage.infrastructure.sqlite import SqliteStore


@dataclass(frozen=True)
class Runtime:
    config: EvalConfig
    store: SqliteStore
    github: GitHubClient
    coordinator: CacheCoordinator
    collaborators: PipelineCollaborators


@asynccontextmanager
async def open_runtime(config: EvalConfig) -> AsyncIterator[Runtime]:
    """Open every client named by *config* and close them all on exit.

    Without a redis_url the hot cache is in-process and lives only as long
    as this runtime; the SQLite store still serves warm hits across runs.
    """
    async with AsyncExitStack() as stack:
        store = await SqliteStore.open(config.storage.path)
        stack.push_async_callback(store.close)

        hot_cache: HotCache
        if config.cache.redis_url:
            redis_cache = RedisHotCache.from_url(config.cache.redis_url)
            stack.push_async_callback(redis_cache.close)
            hot_cache = redis_cache
        else:
            hot_cache = InMemoryHotCache()

        github = GitHubClient(config=config.source)
        stack.push_async_callback(github.aclose)

        scorer = LiteLLMScorer(config=config.scorer, observer=StructlogScoringObserver())
        coordinator = CacheCoordinator(
            hot_cache=hot_cache,
            artifact_store=store,
            observer=StructlogCacheObserver(),
            ttl_seconds=config.cache.ttl_seconds,
        )
        yield Runtime(
            config=config,
            store=store,
            github=github,
            coordinator=coordinator,
            collaborators=PipelineCollaborators(
                version_resolver=github,
                metadata_provider=github,
                content_provider=GitCloneProvider(
                    limits=config.limits, clone_base_url=config.source.clone_base_url
                ),
                scorer=scorer,
                diagram_generator=scorer,
            ),
        )
