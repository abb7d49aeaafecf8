"""Stage Protocol — one named unit of pipeline work."""

from enum import StrEnum
from typing import Protocol

from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey


class FailurePolicy(StrEnum):
    FATAL = "fatal"
    DEGRADABLE = "degradable"


class Stage(Protocol):
    """A pipeline step.

    ``reads`` and ``writes`` declare the workspace keys the stage consumes and
    produces. Running ``execute`` twice against the same inputs leaves the
    same values under the owned keys.

    For a DEGRADABLE stage, an exception from ``execute`` is absorbed by the
    orchestrator, which then calls ``fallback`` to write a substitute result.
    FATAL stages implement ``fallback`` as a no-op; it is never called.
    """

    name: str
    policy: FailurePolicy
    reads: frozenset[WorkspaceKey]
    writes: frozenset[WorkspaceKey]

    async def execute(self, workspace: Workspace, context: RunContext) -> None: ...

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None: ...
