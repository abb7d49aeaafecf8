"""Structlog implementation of the ScoringObserver port."""

import structlog


class StructlogScoringObserver:
    """Delegates scoring domain events to structlog.

    Satisfies the ScoringObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def scoring_started(self, repo: str, model: str) -> None:
        self._log.info("scoring.started", repo=repo, model=model)

    def scoring_completed(self, repo: str, duration_ms: int) -> None:
        self._log.info("scoring.completed", repo=repo, duration_ms=duration_ms)

    def scoring_failed(self, repo: str, reason: str) -> None:
        self._log.error("scoring.failed", repo=repo, reason=reason)

    def diagram_completed(self, repo: str, duration_ms: int) -> None:
        self._log.info("scoring.diagram_completed", repo=repo, duration_ms=duration_ms)
