"""Workspace — typed, per-run accumulator shared by the stages of one job."""

import asyncio
import shutil
from enum import StrEnum
from pathlib import Path
from typing import Any

from git_eval.core.errors import PipelineError
from git_eval.pipeline.domain.errors import (
    MissingWorkspaceValueError,
    UndeclaredWorkspaceAccessError,
)


class WorkspaceKey(StrEnum):
    VERSION = "version"
    CACHE_HIT = "cache_hit"
    CLONE_PATH = "clone_path"
    FILE_COUNT = "file_count"
    REPOSITORY_METADATA = "repository_metadata"
    STATIC_ANALYSIS = "static_analysis"
    CODE_STRUCTURE = "code_structure"
    TEST_ANALYSIS = "test_analysis"
    DOCUMENTATION = "documentation"
    SECURITY = "security"
    METRICS = "metrics"
    SCORE_REPORT = "score_report"
    ARCHITECTURE_DIAGRAM = "architecture_diagram"
    VISUALIZATIONS = "visualizations"
    EVALUATION = "evaluation"


class Workspace:
    """Values produced during one run, plus the scratch directories it owns.

    The orchestrator hands every stage a view from ``scoped``: the view shares
    storage with this workspace but only lets the stage read what it declared
    in ``reads`` or ``writes`` and write what it declared in ``writes``. Keys
    are never deleted.
    """

    def __init__(self) -> None:
        self._values: dict[WorkspaceKey, Any] = {}
        self._scratch: list[Path] = []
        self._stage: str | None = None
        self._readable: frozenset[WorkspaceKey] | None = None
        self._writable: frozenset[WorkspaceKey] | None = None

    def scoped(
        self,
        stage: str,
        reads: frozenset[WorkspaceKey],
        writes: frozenset[WorkspaceKey],
    ) -> "Workspace":
        view = Workspace()
        view._values = self._values
        view._scratch = self._scratch
        view._stage = stage
        view._readable = reads | writes
        view._writable = writes
        return view

    def has(self, key: WorkspaceKey) -> bool:
        return key in self._values

    def get(self, key: WorkspaceKey) -> Any | None:
        self._check(key, self._readable, "read")
        return self._values.get(key)

    def require[T](self, key: WorkspaceKey, expected: type[T]) -> T:
        """Return the value stored under *key*.

        Raises:
            MissingWorkspaceValueError: if no earlier stage wrote *key*.
            PipelineError: if the stored value is not an instance of *expected*.
        """
        self._check(key, self._readable, "read")
        if key not in self._values:
            raise MissingWorkspaceValueError(key=key.value, stage=self._stage)
        value = self._values[key]
        if not isinstance(value, expected):
            raise PipelineError(
                f"Failed to read workspace value {key.value!r}: expected"
                f" {expected.__name__}, got {type(value).__name__}"
            )
        return value

    def put(self, key: WorkspaceKey, value: Any) -> None:
        self._check(key, self._writable, "write")
        self._values[key] = value

    def register_scratch(self, path: Path) -> None:
        """Record *path* as owned by this run so ``release`` removes it."""
        if path not in self._scratch:
            self._scratch.append(path)

    def forget_scratch(self, path: Path) -> None:
        if path in self._scratch:
            self._scratch.remove(path)

    @property
    def scratch_paths(self) -> list[Path]:
        return list(self._scratch)

    async def release(self) -> None:
        """Remove every scratch directory still registered."""
        while self._scratch:
            path = self._scratch.pop()
            await asyncio.to_thread(remove_tree, path)

    def _check(
        self,
        key: WorkspaceKey,
        allowed: frozenset[WorkspaceKey] | None,
        access: str,
    ) -> None:
        if allowed is not None and key not in allowed:
            raise UndeclaredWorkspaceAccessError(
                key=key.value, stage=self._stage or "?", access=access
            )


def remove_tree(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
