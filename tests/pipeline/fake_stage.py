"""FakeStage — a configurable Stage for orchestrator and plan tests."""

import asyncio
from collections.abc import Callable
from typing import Any

from git_eval.pipeline.domain.context import RunContext
from git_eval.pipeline.domain.stage import FailurePolicy
from git_eval.pipeline.domain.workspace import Workspace, WorkspaceKey


class FakeStage:
    """Writes ``values`` into the workspace, or raises ``error``.

    ``log`` (shared between stages) records "start:<name>" / "end:<name>" so
    tests can observe ordering and overlap. ``delay`` yields to the event loop
    before finishing, letting concurrent siblings interleave.
    """

    def __init__(
        self,
        name: str,
        reads: frozenset[WorkspaceKey] = frozenset(),
        writes: frozenset[WorkspaceKey] = frozenset(),
        values: dict[WorkspaceKey, Any] | None = None,
        error: Exception | None = None,
        policy: FailurePolicy = FailurePolicy.FATAL,
        fallback_values: dict[WorkspaceKey, Any] | None = None,
        log: list[str] | None = None,
        delay: float = 0.0,
        on_execute: Callable[[Workspace], None] | None = None,
    ) -> None:
        self.name = name
        self.reads = reads
        self.writes = writes
        self.policy = policy
        self.values = values or {}
        self.error = error
        self.fallback_values = fallback_values or {}
        self.log = log if log is not None else []
        self.delay = delay
        self.on_execute = on_execute
        self.executions = 0
        self.fallback_reasons: list[str] = []
        self.cancelled = False

    async def execute(self, workspace: Workspace, context: RunContext) -> None:
        self.executions += 1
        self.log.append(f"start:{self.name}")
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.on_execute is not None:
            self.on_execute(workspace)
        if self.error is not None:
            raise self.error
        for key, value in self.values.items():
            workspace.put(key, value)
        self.log.append(f"end:{self.name}")

    def fallback(self, workspace: Workspace, context: RunContext, reason: str) -> None:
        self.fallback_reasons.append(reason)
        for key, value in self.fallback_values.items():
            workspace.put(key, value)
