"""StructlogCacheObserver — production observer that delegates to structlog."""

import structlog


class StructlogCacheObserver:
    """Logs cache domain events to structlog.

    Does NOT inherit from CacheObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def cache_hot_hit(self, key: str) -> None:
        self._log.info("cache.lookup.hot_hit", key=key)

    def cache_warm_hit(self, key: str) -> None:
        self._log.info("cache.lookup.warm_hit", key=key)

    def cache_miss(self, key: str) -> None:
        self._log.info("cache.lookup.miss", key=key)

    def cache_hot_read_failed(self, key: str, reason: str) -> None:
        self._log.warning("cache.hot.read_failed", key=key, reason=reason)

    def cache_hot_write_failed(self, key: str, reason: str) -> None:
        self._log.warning("cache.hot.write_failed", key=key, reason=reason)

    def cache_backfilled(self, key: str) -> None:
        self._log.info("cache.hot.backfilled", key=key)

    def cache_stored(self, key: str, artifact_id: str) -> None:
        self._log.info("cache.store.completed", key=key, artifact_id=artifact_id)

    def cache_invalidated(self, key: str) -> None:
        self._log.info("cache.hot.invalidated", key=key)
