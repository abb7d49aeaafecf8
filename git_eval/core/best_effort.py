"""best_effort — the single place where git-eval deliberately swallows errors.

Operations that must succeed are awaited directly and propagate. Operations that
are optimizations or telemetry (hot-cache writes, progress updates, scratch
cleanup) are awaited through ``best_effort`` so the distinction is visible at
every call site.
"""

from collections.abc import Awaitable, Callable


async def best_effort[T](
    operation: Awaitable[T],
    on_error: Callable[[Exception], None],
) -> T | None:
    """Await *operation*; on failure report the exception to *on_error* and return None."""
    try:
        return await operation
    except Exception as exc:  # noqa: BLE001
        on_error(exc)
        return None
