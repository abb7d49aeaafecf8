"""Base exception classes for all git-eval-specific errors.

The hierarchy is closed: every error raised by git-eval belongs to exactly one
taxonomy class below, and callers decide retry policy from ``retriable``.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_URL = "invalid_url"
    REPOSITORY_NOT_FOUND = "repository_not_found"
    REPOSITORY_TOO_LARGE = "repository_too_large"
    TOO_MANY_FILES = "too_many_files"
    PRIVATE_REPOSITORY = "private_repository"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"
    DATABASE_ERROR = "database_error"
    PIPELINE_ERROR = "pipeline_error"
    CONFIG_ERROR = "config_error"
    UNKNOWN_ERROR = "unknown_error"


class GitEvalError(Exception):
    """Base class for all git-eval errors."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        retriable: bool = False,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        self.retriable = retriable
        if code is not None:
            self.code = code


class InputError(GitEvalError):
    """The requested repository cannot be evaluated as given. Never retried."""

    def __init__(self, message: str, code: ErrorCode) -> None:
        super().__init__(message, retriable=False, code=code)


class InvalidRepositoryUrlError(InputError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            f"Failed to parse repository URL: {url!r}", code=ErrorCode.INVALID_URL
        )


class RepositoryNotFoundError(InputError):
    def __init__(self, owner: str, name: str) -> None:
        self.owner = owner
        self.name = name
        super().__init__(
            f"Failed to find repository: {owner}/{name}",
            code=ErrorCode.REPOSITORY_NOT_FOUND,
        )


class RepositoryInaccessibleError(InputError):
    """Raised when the repository exists but is private or otherwise forbidden."""

    def __init__(self, owner: str, name: str) -> None:
        self.owner = owner
        self.name = name
        super().__init__(
            f"Failed to access repository: {owner}/{name} is private or inaccessible",
            code=ErrorCode.PRIVATE_REPOSITORY,
        )


class RepositoryTooLargeError(InputError):
    def __init__(self, size_mb: float, limit_mb: int) -> None:
        self.size_mb = size_mb
        self.limit_mb = limit_mb
        super().__init__(
            f"Failed to fetch repository: size {size_mb:.2f}MB exceeds the size"
            f" limit of {limit_mb}MB",
            code=ErrorCode.REPOSITORY_TOO_LARGE,
        )


class TooManyFilesError(InputError):
    def __init__(self, file_count: int, limit: int) -> None:
        self.file_count = file_count
        self.limit = limit
        super().__init__(
            f"Failed to fetch repository: {file_count} files exceeds the file"
            f" limit of {limit}",
            code=ErrorCode.TOO_MANY_FILES,
        )


class TransientError(GitEvalError):
    """A collaborator failed in a way that may succeed on a later attempt.

    Fatal to the current run; the caller owns retry policy.
    """

    def __init__(self, message: str, code: ErrorCode) -> None:
        super().__init__(message, retriable=True, code=code)


class RateLimitedError(TransientError):
    def __init__(self, service: str, retry_after_seconds: float | None = None) -> None:
        self.service = service
        self.retry_after_seconds = retry_after_seconds
        hint = (
            f" (retry after {retry_after_seconds:g}s)"
            if retry_after_seconds is not None
            else ""
        )
        super().__init__(
            f"Failed to call {service}: rate limit exceeded{hint}",
            code=ErrorCode.RATE_LIMITED,
        )


class CollaboratorTimeoutError(TransientError):
    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Failed to {operation}: timed out after {timeout_seconds:g}s",
            code=ErrorCode.TIMEOUT,
        )


class UpstreamError(TransientError):
    def __init__(
        self, service: str, reason: str, status_code: int | None = None
    ) -> None:
        self.service = service
        self.status_code = status_code
        status = f" (status {status_code})" if status_code is not None else ""
        super().__init__(
            f"Failed to call {service}{status}: {reason}",
            code=ErrorCode.UPSTREAM_ERROR,
        )


class MalformedResponseError(GitEvalError):
    """A collaborator answered, but the answer could not be used."""

    def __init__(self, service: str, reason: str) -> None:
        self.service = service
        super().__init__(
            f"Failed to parse {service} response: {reason}",
            code=ErrorCode.MALFORMED_RESPONSE,
        )


class PersistenceError(GitEvalError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code=ErrorCode.DATABASE_ERROR)


class ArtifactStoreError(PersistenceError):
    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Failed to {operation} artifact: {reason}")


class JobStoreError(PersistenceError):
    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Failed to {operation} job: {reason}")


class JobNotFoundError(PersistenceError):
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Failed to find job: {job_id}")


class PipelineError(GitEvalError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code=ErrorCode.PIPELINE_ERROR)


class StageExecutionError(PipelineError):
    """Wraps an unexpected (non git-eval) exception raised inside a stage."""

    def __init__(self, stage: str, reason: str) -> None:
        self.stage = stage
        super().__init__(f"Failed to run stage {stage}: {reason}")
