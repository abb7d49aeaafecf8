"""ProgressPipelineObserver — renders a Rich progress bar for one job to stderr."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


def _make_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("{task.description}"),
        BarColumn(bar_width=40, complete_style="bright_green"),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        TextColumn("[dim]{task.fields[stages]}[/dim]"),
        console=console,
        refresh_per_second=10,
        transient=False,
    )


class ProgressPipelineObserver:
    """Shows job progress (0-100) and the stages currently running.

    Only run_started, stage_started, stage_completed, stage_degraded,
    progress_updated and the terminal run events produce output; all other
    events are no-ops.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests).

    Does NOT inherit from PipelineObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._running: list[str] = []
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    @property
    def running_stages(self) -> list[str]:
        return list(self._running)

    def _refresh(self, completed: int | None = None) -> None:
        if self._progress is None or self._task_id is None:
            return
        stages = ", ".join(self._running)
        if completed is None:
            self._progress.update(self._task_id, stages=stages)
        else:
            self._progress.update(self._task_id, completed=completed, stages=stages)

    def _stop(self, completed: int | None = None) -> None:
        self._running = []
        self._refresh(completed=completed)
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None

    def run_started(self, job_id: str, repo: str, total_stages: int) -> None:
        self._running = []
        if self._disabled:
            return
        self._progress = _make_progress(console=Console(stderr=True))
        self._task_id = self._progress.add_task(
            description=f"[bold]{repo}[/bold]", total=100.0, stages=""
        )
        self._progress.start()

    def run_served_from_cache(self, job_id: str, repo: str, result_id: str) -> None:
        self._stop(completed=100)

    def run_completed(
        self, job_id: str, repo: str, result_id: str, elapsed_seconds: float
    ) -> None:
        self._stop(completed=100)

    def run_failed(
        self, job_id: str, repo: str, error_code: str, retriable: bool, reason: str
    ) -> None:
        self._stop()

    def stage_started(self, job_id: str, stage: str) -> None:
        self._running.append(stage)
        self._refresh()

    def stage_completed(self, job_id: str, stage: str, duration_ms: int) -> None:
        if stage in self._running:
            self._running.remove(stage)
        self._refresh()

    def stage_degraded(self, job_id: str, stage: str, reason: str) -> None:
        if stage in self._running:
            self._running.remove(stage)
        self._refresh()

    def stage_failed(self, job_id: str, stage: str, reason: str) -> None:
        pass

    def progress_updated(self, job_id: str, progress: int) -> None:
        self._refresh(completed=progress)

    def progress_update_failed(self, job_id: str, progress: int, reason: str) -> None:
        pass

    def failure_record_failed(self, job_id: str, reason: str) -> None:
        pass

    def scratch_release_failed(self, job_id: str, reason: str) -> None:
        pass
