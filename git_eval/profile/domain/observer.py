"""ProfileObserver port — domain events emitted while aggregating a user profile."""

from typing import Protocol


class ProfileObserver(Protocol):
    def profile_started(self, job_id: str, username: str, repositories: int) -> None: ...

    def profile_repository_missing(self, job_id: str, repo: str, reason: str) -> None: ...

    def profile_completed(
        self, job_id: str, username: str, evaluated: int, missing: int
    ) -> None: ...

    def profile_failed(self, job_id: str, username: str, reason: str) -> None: ...

    def profile_progress_update_failed(
        self, job_id: str, progress: int, reason: str
    ) -> None: ...

    def profile_failure_record_failed(self, job_id: str, reason: str) -> None: ...
