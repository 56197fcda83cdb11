"""Shared test fixtures for taigapilot tests."""

from __future__ import annotations

import pytest

from taigapilot.config import TrackerSettings
from taigapilot.models.enums import TaskKind, TaskStatus
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import TaskBundle, TaskItem
from taigapilot.models.tracker import TrackerMember, TrackerProject
from tests.fakes.tracker import FakeTracker


class RecordingSleep:
    """Async stand-in for ``asyncio.sleep`` that records every delay."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def project() -> TrackerProject:
    return TrackerProject(id=10, name="Demo", slug="demo")


@pytest.fixture
def tracker(project: TrackerProject) -> FakeTracker:
    return FakeTracker(projects=[project])


@pytest.fixture
def two_member_tracker(project: TrackerProject) -> FakeTracker:
    return FakeTracker(
        projects=[project],
        members=[
            TrackerMember(id=7, full_name="Ada Lovelace", username="ada", email="ada@example.com"),
            TrackerMember(id=8, full_name="Grace Hopper", username="grace", email="grace@example.com"),
        ],
    )


@pytest.fixture
def settings() -> TrackerSettings:
    return TrackerSettings(api_url="https://api.taiga.io/api/v1", username="tester", password="secret")


@pytest.fixture
def laravel_profile() -> ProjectProfile:
    return ProjectProfile(type="laravel", framework="Laravel", has_version_control=True)


@pytest.fixture
def sample_bundle() -> TaskBundle:
    return TaskBundle(
        epics=[TaskItem(kind=TaskKind.EPIC, title="Epic: Core Features", status=TaskStatus.COMPLETED)],
        user_stories=[
            TaskItem(kind=TaskKind.STORY, title="Feature: User Login"),
            TaskItem(kind=TaskKind.STORY, title="Feature: Billing"),
        ],
        tasks=[TaskItem(kind=TaskKind.TASK, title="Add tests for api.js", author="ada")],
    )
