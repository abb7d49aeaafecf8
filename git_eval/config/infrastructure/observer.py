"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str) -> None:
        self._log.info("config.loaded", path=path)

    def config_source_token_missing(self) -> None:
        self._log.warning(
            "config.source_token_missing",
            message="No source token configured; API rate limits will be strict",
        )
