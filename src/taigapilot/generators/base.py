"""Shared generator contract and submission engine.

Concrete generators only implement :meth:`TaskGenerator.generate_tasks`, a
pure "parse source -> task bundle" transformation. Submission to the
tracker lives here, once, for every generator.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import ClassVar

from taigapilot.exceptions import TrackerError
from taigapilot.generators.resolve import StatusMap, resolve_assignee
from taigapilot.generators.sanitize import clean_submission_title
from taigapilot.models.enums import TaskKind, TaskStatus
from taigapilot.models.history import Commit
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import ExecutionResult, TaskBundle, TaskItem
from taigapilot.models.tracker import CreateUserStoryInput, TrackerProject
from taigapilot.progress import NullSubmitProgress, SubmitProgress
from taigapilot.tracker.base import Tracker

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

HIGH_PRIORITY_KEYWORDS = ("critical", "urgent", "security", "bug", "fix")
MEDIUM_PRIORITY_KEYWORDS = ("feature", "enhancement", "improvement")


class TaskGenerator(ABC):
    """Base class for every task generator.

    Attributes:
        profile: Detected project profile, used for framework tags.
    """

    name: ClassVar[str] = "generator"

    # Seconds to wait after each successful submission; a crude guard
    # against the tracker's rate limits.
    SUBMIT_DELAYS: ClassVar[dict[TaskKind, float]] = {
        TaskKind.EPIC: 0.5,
        TaskKind.STORY: 0.4,
        TaskKind.TASK: 0.3,
    }

    def __init__(self, profile: ProjectProfile | None = None, *, sleep: Sleep = asyncio.sleep) -> None:
        self.profile = profile
        self._sleep = sleep

    @abstractmethod
    def generate_tasks(self) -> TaskBundle:
        """Transform this generator's source into a task bundle. Never calls the tracker."""

    async def execute(
        self,
        tracker: Tracker,
        project: TrackerProject,
        *,
        bundle: TaskBundle | None = None,
        progress: SubmitProgress | None = None,
    ) -> ExecutionResult:
        """Submit every item of *bundle* (generated on demand) as a tracker user story.

        Items go out strictly in order (epics, stories, tasks). A rejected
        item is logged and skipped; it never stops the loop.
        """
        bundle = bundle if bundle is not None else self.generate_tasks()
        progress = progress or NullSubmitProgress()

        status_map = StatusMap.from_statuses(await tracker.list_user_story_statuses(project.id))
        members = await tracker.get_project_members(project.id)
        result = ExecutionResult()

        for kind, items in (
            (TaskKind.EPIC, bundle.epics),
            (TaskKind.STORY, bundle.user_stories),
            (TaskKind.TASK, bundle.tasks),
        ):
            if not items:
                continue
            progress.batch_start(self.name, kind, len(items))
            try:
                for item in items:
                    created = await self._submit(tracker, project, item, kind, status_map, members, result)
                    progress.item_done(self.name, kind, created=created)
                progress.batch_done(self.name, kind)
            except BaseException as exc:
                progress.batch_error(self.name, kind, exc)
                raise

        return result

    async def _submit(
        self,
        tracker: Tracker,
        project: TrackerProject,
        item: TaskItem,
        kind: TaskKind,
        status_map: StatusMap,
        members: Sequence,
        result: ExecutionResult,
    ) -> bool:
        subject = clean_submission_title(item.title)
        if not subject:
            logger.warning("Skipping %s with an unusable title: %r", kind, item.title)
            result.skipped.append(item.title)
            return False

        story_input = CreateUserStoryInput(
            project=project.id,
            subject=subject,
            description=item.description,
            status=status_map.for_status(item.status),
            tags=list(item.tags),
            assigned_to=resolve_assignee(item.author, list(members)),
        )
        try:
            await tracker.create_user_story(story_input)
        except TrackerError as exc:
            logger.error("Failed to create %s %r: %s", kind, subject, exc)
            result.failed.append(subject)
            return False

        result.created[kind] += 1
        logger.info("Created %s: %s", kind, subject)
        await self._sleep(self.SUBMIT_DELAYS[kind])
        return True

    # ------------------------------------------------------------------
    # Helpers shared by concrete generators
    # ------------------------------------------------------------------

    def generate_tags(self, content: str, kind: str = "general") -> list[str]:
        """Tags for an item: its kind, the framework (when known) and a priority tier."""
        tags = [kind]
        if self.profile is not None and self.profile.framework:
            tags.append(self.profile.framework.lower())

        lowered = content.lower()
        if any(keyword in lowered for keyword in HIGH_PRIORITY_KEYWORDS):
            tags.append("high-priority")
        elif any(keyword in lowered for keyword in MEDIUM_PRIORITY_KEYWORDS):
            tags.append("medium-priority")
        else:
            tags.append("low-priority")
        return tags

    @staticmethod
    def format_description(
        base: str,
        *,
        source: str | None = None,
        date: str | None = None,
        author: str | None = None,
        commits: Sequence[Commit] = (),
        files: Sequence[Path | str] = (),
    ) -> str:
        """Append source/date/author/commit/file metadata blocks to *base*."""
        description = base
        if source:
            description += f"\n\n**Source:** {source}"
        if date:
            description += f"\n**Date:** {date}"
        if author:
            description += f"\n**Author:** {author}"
        if commits:
            description += "\n\n**Related Commits:**\n"
            description += "".join(f"- `{c.hash}` ({c.date}): {c.message}\n" for c in commits)
        if files:
            description += "\n\n**Related Files:**\n"
            description += "".join(f"- {f}\n" for f in files)
        return description

    @staticmethod
    def determine_status(
        *,
        from_history: bool = False,
        commits: Sequence[Commit] = (),
    ) -> TaskStatus:
        """Status fallback for generators that don't decide it explicitly.

        History-derived items are completed work; everything else is new.
        """
        if from_history or commits:
            return TaskStatus.COMPLETED
        return TaskStatus.NEW
