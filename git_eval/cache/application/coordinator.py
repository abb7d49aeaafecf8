"""CacheCoordinator — one logical get/set over the hot cache and the artifact store."""

from pydantic import ValidationError

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.artifact.domain.hot_cache import HotCache
from git_eval.artifact.domain.key import CacheKey
from git_eval.artifact.domain.store import ArtifactStore
from git_eval.cache.domain.observer import CacheObserver
from git_eval.config.domain.cache import DEFAULT_TTL_SECONDS
from git_eval.core.best_effort import best_effort


class CacheCoordinator:
    """Layers an expiring hot cache in front of the durable artifact store.

    The coordinator never derives or remembers keys: callers pass a CacheKey
    built from the version they resolved for the current request.
    """

    def __init__(
        self,
        hot_cache: HotCache,
        artifact_store: ArtifactStore,
        observer: CacheObserver,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._hot_cache = hot_cache
        self._artifact_store = artifact_store
        self._observer = observer
        self._ttl_seconds = ttl_seconds

    async def lookup(self, key: CacheKey) -> Evaluation | None:
        """Return the artifact for *key*, or None when neither store has it.

        A hot hit never touches the artifact store. A warm hit is written back
        into the hot cache before returning; a failed backfill is logged only.
        Artifact store read errors propagate.
        """
        key_str = key.as_string()

        hot = await self._read_hot(key_str)
        if hot is not None:
            self._observer.cache_hot_hit(key=key_str)
            return hot.model_copy(update={"cached": True})

        stored = await self._artifact_store.get_artifact_by_key(key)
        if stored is None:
            self._observer.cache_miss(key=key_str)
            return None

        self._observer.cache_warm_hit(key=key_str)
        backfilled = await best_effort(
            self._write_hot(key_str, stored),
            on_error=lambda exc: self._observer.cache_hot_write_failed(
                key=key_str, reason=str(exc)
            ),
        )
        if backfilled:
            self._observer.cache_backfilled(key=key_str)
        return stored.model_copy(update={"cached": True})

    async def store(
        self, key: CacheKey, artifact: Evaluation, replace: bool = False
    ) -> Evaluation:
        """Write-through: artifact store first, then hot cache.

        With *replace* an artifact already stored under *key* is overwritten.
        If the hot write then fails, the hot entry is dropped so the previous
        artifact cannot be served from it.

        Raises:
            ArtifactStoreError: if the durable write fails. The hot cache is not
                touched in that case.
        """
        key_str = key.as_string()
        stored = await self._artifact_store.put_artifact(
            artifact.model_copy(
                update={
                    "owner": key.owner,
                    "repo": key.name,
                    "commit_sha": key.version,
                    "cached": False,
                }
            ),
            replace=replace,
        )
        self._observer.cache_stored(key=key_str, artifact_id=stored.id)

        written = await best_effort(
            self._write_hot(key_str, stored),
            on_error=lambda exc: self._observer.cache_hot_write_failed(
                key=key_str, reason=str(exc)
            ),
        )
        if replace and not written:
            await self.invalidate(key)
        return stored

    async def invalidate(self, key: CacheKey) -> None:
        """Drop *key* from the hot cache. The artifact store is left untouched."""
        key_str = key.as_string()
        await best_effort(
            self._hot_cache.delete(key_str),
            on_error=lambda exc: self._observer.cache_hot_write_failed(
                key=key_str, reason=str(exc)
            ),
        )
        self._observer.cache_invalidated(key=key_str)

    async def _read_hot(self, key_str: str) -> Evaluation | None:
        raw = await best_effort(
            self._hot_cache.get(key_str),
            on_error=lambda exc: self._observer.cache_hot_read_failed(
                key=key_str, reason=str(exc)
            ),
        )
        if raw is None:
            return None
        try:
            return Evaluation.model_validate_json(raw)
        except ValidationError as exc:
            # An unreadable entry is a miss; the next store overwrites it.
            self._observer.cache_hot_read_failed(key=key_str, reason=str(exc))
            return None

    async def _write_hot(self, key_str: str, artifact: Evaluation) -> bool:
        await self._hot_cache.set(
            key_str,
            artifact.model_copy(update={"cached": False}).model_dump_json(),
            ttl_seconds=self._ttl_seconds,
        )
        return True
