"""Enumerated types used across taigapilot."""

from __future__ import annotations

from enum import StrEnum


class TaskKind(StrEnum):
    """Discriminator for the three generated work-item granularities."""

    EPIC = "epic"
    STORY = "story"
    TASK = "task"


class TaskStatus(StrEnum):
    """Lifecycle state decided once, at generation time."""

    NEW = "new"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Severity(StrEnum):
    """Severity attached to a security finding."""

    CRITICAL = "critical"
    HIGH = "high"
