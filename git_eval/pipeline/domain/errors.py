"""Errors raised by the pipeline domain when a plan or workspace is misused."""

from git_eval.core.errors import PipelineError


class InvalidPipelinePlanError(PipelineError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to build pipeline plan: {reason}")


class OverlappingStageWritesError(InvalidPipelinePlanError):
    """Raised when two stages of one concurrent group declare the same output key."""

    def __init__(self, first: str, second: str, keys: list[str]) -> None:
        self.first = first
        self.second = second
        self.keys = keys
        super().__init__(
            f"stages {first!r} and {second!r} run concurrently but both write"
            f" {', '.join(keys)}"
        )


class MissingWorkspaceValueError(PipelineError):
    def __init__(self, key: str, stage: str | None = None) -> None:
        self.key = key
        self.stage = stage
        where = f" for stage {stage}" if stage else ""
        super().__init__(f"Failed to read workspace value {key!r}{where}: not present")


class UndeclaredWorkspaceAccessError(PipelineError):
    def __init__(self, key: str, stage: str, access: str) -> None:
        self.key = key
        self.stage = stage
        super().__init__(
            f"Failed to {access} workspace value {key!r}: stage {stage} does not"
            f" declare it"
        )
