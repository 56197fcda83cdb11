"""Bulk reassignment of unassigned user stories.

The one place that mutates existing tracker records: every user story
without an assignee is patched to point at a single target member.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from taigapilot.exceptions import SetupError, TrackerError
from taigapilot.generators.base import Sleep
from taigapilot.models.tracker import TrackerMember, TrackerProject, TrackerUserStory
from taigapilot.tracker.base import Tracker

logger = logging.getLogger(__name__)

ASSIGN_DELAY_SECONDS = 0.3

StoryCallback = Callable[[TrackerUserStory, TrackerError | None], None]


@dataclass(frozen=True)
class AssignmentPlan:
    """What a bulk reassignment would do to one project."""

    project: TrackerProject
    members: list[TrackerMember]
    stories: list[TrackerUserStory]

    @property
    def target(self) -> TrackerMember:
        """The first member receives every unassigned story."""
        if not self.members:
            raise SetupError(f"No team members found in project {self.project.name!r}")
        return self.members[0]

    @property
    def unassigned(self) -> list[TrackerUserStory]:
        return [story for story in self.stories if story.assigned_to is None]

    @property
    def already_assigned(self) -> int:
        return len(self.stories) - len(self.unassigned)

    @property
    def needs_confirmation(self) -> bool:
        """Multi-member projects get an extra prompt before everything goes to one person."""
        return len(self.members) > 1


@dataclass
class AssignmentReport:
    total: int
    already_assigned: int
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def assignment_rate(self) -> int:
        """Percentage of stories that have an assignee after the run."""
        if self.total == 0:
            return 100
        return round((self.already_assigned + len(self.succeeded)) / self.total * 100)


async def plan_assignment(tracker: Tracker, project: TrackerProject) -> AssignmentPlan:
    members = await tracker.get_project_members(project.id)
    stories = await tracker.list_user_stories(project.id)
    return AssignmentPlan(project=project, members=members, stories=stories)


async def apply_assignment(
    tracker: Tracker,
    plan: AssignmentPlan,
    *,
    sleep: Sleep = asyncio.sleep,
    on_story: StoryCallback | None = None,
) -> AssignmentReport:
    """Patch each unassigned story to the plan's target, one at a time.

    A failed patch is recorded and the loop moves on.
    """
    target = plan.target
    report = AssignmentReport(total=len(plan.stories), already_assigned=plan.already_assigned)
    for story in plan.unassigned:
        try:
            await tracker.update_user_story(story.id, {"assigned_to": target.id})
        except TrackerError as exc:
            logger.error("Failed to assign %r: %s", story.subject, exc)
            report.failed.append(story.subject)
            if on_story is not None:
                on_story(story, exc)
            continue
        report.succeeded.append(story.subject)
        if on_story is not None:
            on_story(story, None)
        await sleep(ASSIGN_DELAY_SECONDS)
    return report
