"""ScoringObserver port — domain events emitted during scorer invocations."""

from typing import Protocol


class ScoringObserver(Protocol):
    def scoring_started(self, repo: str, model: str) -> None: ...

    def scoring_completed(self, repo: str, duration_ms: int) -> None: ...

    def scoring_failed(self, repo: str, reason: str) -> None: ...

    def diagram_completed(self, repo: str, duration_ms: int) -> None: ...
