"""Generation output: task items and bundles."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field

from taigapilot.models.enums import TaskKind, TaskStatus


class TaskItem(BaseModel):
    """One generated work item.

    The three flavors share this shape and differ only by :attr:`kind`.
    """

    kind: TaskKind
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.NEW
    tags: list[str] = Field(default_factory=list)
    author: str | None = None

    model_config = {"frozen": True}


class TaskBundle(BaseModel):
    """Normalized ``{epics, user_stories, tasks}`` output of a generator."""

    epics: list[TaskItem] = Field(default_factory=list)
    user_stories: list[TaskItem] = Field(default_factory=list)
    tasks: list[TaskItem] = Field(default_factory=list)

    def items(self) -> Iterator[TaskItem]:
        """Yield every item in submission order: epics, stories, then tasks."""
        yield from self.epics
        yield from self.user_stories
        yield from self.tasks

    @property
    def total(self) -> int:
        return len(self.epics) + len(self.user_stories) + len(self.tasks)


class ExecutionResult(BaseModel):
    """Console summary of one generator's submission run."""

    created: dict[TaskKind, int] = Field(default_factory=lambda: {kind: 0 for kind in TaskKind})
    failed: list[str] = Field(default_factory=list)
    """Titles of items the tracker rejected."""
    skipped: list[str] = Field(default_factory=list)
    """Titles dropped before submission because nothing usable remained after cleaning."""

    @property
    def total_created(self) -> int:
        return sum(self.created.values())
