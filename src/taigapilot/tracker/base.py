"""Abstract tracker contract.

The generators and utilities only talk to this interface, so the HTTP
client can be swapped for an in-memory fake in tests. All methods are
``async``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taigapilot.models.tracker import (
    CreateProjectInput,
    CreateTaskInput,
    CreateUserStoryInput,
    TrackerMember,
    TrackerProject,
    TrackerStatus,
    TrackerUser,
    TrackerUserStory,
)


class Tracker(ABC):
    """Project tracker operations used by taigapilot."""

    @abstractmethod
    async def get_current_user(self) -> TrackerUser:
        """Return the authenticated user."""

    @abstractmethod
    async def list_projects(self) -> list[TrackerProject]:
        """Projects the authenticated user is a member of."""

    @abstractmethod
    async def create_project(self, project_input: CreateProjectInput) -> TrackerProject: ...

    @abstractmethod
    async def get_project(self, project_id: int) -> TrackerProject: ...

    @abstractmethod
    async def get_project_by_slug(self, slug: str) -> TrackerProject: ...

    @abstractmethod
    async def get_project_members(self, project_id: int) -> list[TrackerMember]:
        """Members embedded in the project detail; empty when unavailable."""

    @abstractmethod
    async def list_user_story_statuses(self, project_id: int) -> list[TrackerStatus]: ...

    @abstractmethod
    async def list_user_stories(self, project_id: int) -> list[TrackerUserStory]: ...

    @abstractmethod
    async def get_user_story(self, story_id: int) -> TrackerUserStory: ...

    @abstractmethod
    async def create_user_story(self, story_input: CreateUserStoryInput) -> TrackerUserStory:
        """Create a user story.

        Raises:
            TrackerError: If the tracker rejects the record.
        """

    @abstractmethod
    async def update_user_story(self, story_id: int, changes: dict[str, object]) -> TrackerUserStory:
        """Patch *changes* onto a story, echoing its current version."""

    @abstractmethod
    async def list_task_statuses(self, project_id: int) -> list[TrackerStatus]: ...

    @abstractmethod
    async def create_task(self, task_input: CreateTaskInput) -> dict[str, object]: ...
