"""Observer port for the cache domain — defines events in domain language."""

from typing import Protocol


class CacheObserver(Protocol):
    """Observer port emitting structured events from the CacheCoordinator.

    Implementations may log to structlog or record for tests.
    """

    def cache_hot_hit(self, key: str) -> None: ...

    def cache_warm_hit(self, key: str) -> None: ...

    def cache_miss(self, key: str) -> None: ...

    def cache_hot_read_failed(self, key: str, reason: str) -> None: ...

    def cache_hot_write_failed(self, key: str, reason: str) -> None: ...

    def cache_backfilled(self, key: str) -> None: ...

    def cache_stored(self, key: str, artifact_id: str) -> None: ...

    def cache_invalidated(self, key: str) -> None: ...
