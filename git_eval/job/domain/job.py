"""JobRecord — the persisted lifecycle of one evaluation request."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from git_eval.core.errors import ErrorCode
from git_eval.job.domain.errors import InvalidJobTransitionError, ProgressRegressionError


class JobKind(StrEnum):
    REPOSITORY = "repository"
    USER_PROFILE = "user_profile"


class JobStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


_ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.PROCESSING}),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


def validate_transition(job_id: str, current: JobStatus, target: JobStatus) -> None:
    """Raise InvalidJobTransitionError unless current -> target is a lifecycle edge.

    A same-status update is allowed only while processing (progress ticks).
    """
    if current == target == JobStatus.PROCESSING:
        return
    if target not in _ALLOWED_TRANSITIONS[current]:
        raise InvalidJobTransitionError(
            job_id=job_id, current=current.value, target=target.value
        )


class JobRecord(BaseModel, frozen=True):
    """Immutable snapshot of a job as read from the JobStore."""

    id: str = Field(min_length=1)
    kind: JobKind
    payload: dict[str, Any]
    status: JobStatus = JobStatus.PENDING
    progress: int = Field(default=0, ge=0, le=100)
    error: str | None = None
    error_code: ErrorCode | None = None
    retriable: bool | None = None
    result_id: str | None = None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None


class JobUpdate(BaseModel, frozen=True):
    """A partial update to a JobRecord. Unset fields are left unchanged."""

    status: JobStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    error: str | None = None
    error_code: ErrorCode | None = None
    retriable: bool | None = None
    result_id: str | None = None


def apply_update(job: JobRecord, update: JobUpdate, now: datetime) -> JobRecord:
    """Return *job* with *update* applied, enforcing the lifecycle invariants.

    Raises:
        InvalidJobTransitionError: if the status change is not a lifecycle edge,
            or a completed job would not carry progress 100.
        ProgressRegressionError: if progress would decrease.
    """
    changes: dict[str, Any] = {"updated_at": now}

    status = job.status
    if update.status is not None:
        validate_transition(job_id=job.id, current=job.status, target=update.status)
        status = update.status
        changes["status"] = status
        if status == JobStatus.PROCESSING and job.started_at is None:
            changes["started_at"] = now
        if status.is_terminal:
            changes["completed_at"] = now
    elif job.status.is_terminal:
        raise InvalidJobTransitionError(
            job_id=job.id, current=job.status.value, target=job.status.value
        )

    if update.progress is not None:
        if update.progress < job.progress:
            raise ProgressRegressionError(
                job_id=job.id, current=job.progress, target=update.progress
            )
        changes["progress"] = update.progress

    if status == JobStatus.COMPLETED and changes.get("progress", job.progress) != 100:
        raise InvalidJobTransitionError(
            job_id=job.id, current=job.status.value, target="completed without progress 100"
        )

    for field in ("error", "error_code", "retriable", "result_id"):
        value = getattr(update, field)
        if value is not None:
            changes[field] = value

    return job.model_copy(update=changes)


class JobStatusView(BaseModel, frozen=True):
    """The shape returned to polling callers."""

    id: str
    status: JobStatus
    progress: int
    error: str | None = None
    retriable: bool | None = None
    result_id: str | None = None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_record(cls, job: JobRecord) -> "JobStatusView":
        return cls.model_validate(job.model_dump(exclude={"kind", "payload", "error_code"}))
