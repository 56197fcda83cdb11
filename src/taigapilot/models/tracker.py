"""Read-only mirrors of tracker entities.

Fetched fresh per run and never cached. Unknown payload keys are ignored so
the models tolerate the tracker's much larger JSON documents.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _TrackerModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TrackerProject(_TrackerModel):
    id: int
    name: str
    slug: str = ""
    description: str | None = None


class TrackerStatus(_TrackerModel):
    id: int
    name: str
    order: int = 0
    is_closed: bool = False


class TrackerMember(_TrackerModel):
    id: int
    full_name: str | None = None
    username: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or f"member {self.id}"


class TrackerUser(_TrackerModel):
    id: int
    username: str | None = None
    full_name: str | None = None


class TrackerUserStory(_TrackerModel):
    id: int
    subject: str
    version: int = 1
    status: int | None = None
    assigned_to: int | None = None


class CreateUserStoryInput(BaseModel):
    """Payload for creating a user story."""

    project: int
    subject: str
    description: str = ""
    status: int | None = None
    tags: list[str] = Field(default_factory=list)
    assigned_to: int | None = None


class CreateTaskInput(BaseModel):
    """Payload for creating a task under a user story."""

    project: int
    subject: str
    user_story: int | None = None
    description: str = ""
    status: int | None = None
    tags: list[str] = Field(default_factory=list)


class CreateProjectInput(BaseModel):
    name: str
    description: str = ""
    is_private: bool = False
    creation_template: int = 1
    """Project template id; ``1`` is the Kanban template."""
