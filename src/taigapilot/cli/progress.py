"""Rich display of the submission loop: one bar per generator and item kind."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from taigapilot.models.enums import TaskKind
from taigapilot.progress import SubmitProgress


@dataclass
class _Batch:
    task_id: RichTaskID
    label: str
    failed: int = 0


class RichSubmitProgress(SubmitProgress):
    """Live progress bars for every generator of a pipeline run.

    Use as a context manager around the whole run::

        with RichSubmitProgress() as progress:
            await run_pipeline(..., progress=progress)
    """

    _KIND_LABELS: ClassVar[dict[TaskKind, str]] = {
        TaskKind.EPIC: "[magenta]epics[/]",
        TaskKind.STORY: "[green]stories[/]",
        TaskKind.TASK: "[blue]tasks[/]",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
        )
        self._batches: dict[tuple[str, TaskKind], _Batch] = {}

    def __enter__(self) -> RichSubmitProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def batch_start(self, source: str, kind: TaskKind, total: int) -> None:
        label = f"[bold]{source}[/] {self._KIND_LABELS[kind]}"
        task_id = self._progress.add_task(label, total=total)
        self._batches[(source, kind)] = _Batch(task_id=task_id, label=label)

    def item_done(self, source: str, kind: TaskKind, *, created: bool) -> None:
        batch = self._batches.get((source, kind))
        if batch is None:
            return
        if not created:
            batch.failed += 1
            self._progress.update(batch.task_id, description=f"{batch.label} [red]({batch.failed} failed)[/]")
        self._progress.advance(batch.task_id)

    def batch_done(self, source: str, kind: TaskKind) -> None:
        batch = self._batches.get((source, kind))
        if batch is not None:
            total = self._progress.tasks[batch.task_id].total
            self._progress.update(batch.task_id, completed=total)

    def batch_error(self, source: str, kind: TaskKind, error: BaseException) -> None:
        batch = self._batches.get((source, kind))
        if batch is not None:
            self._progress.update(batch.task_id, description=f"[red]✗[/red] {batch.label}")
            self._progress.stop_task(batch.task_id)
