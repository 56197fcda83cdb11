"""Domain models for taigapilot."""

from taigapilot.models.enums import Severity, TaskKind, TaskStatus
from taigapilot.models.history import (
    Branch,
    Commit,
    Contributor,
    EpicSuggestion,
    HistoryStatistics,
    HistorySummary,
)
from taigapilot.models.metrics import NO_TEST_DIRECTORY, CodeMetrics, SecurityIssue
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import ExecutionResult, TaskBundle, TaskItem
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

__all__ = [
    "NO_TEST_DIRECTORY",
    "Branch",
    "CodeMetrics",
    "Commit",
    "Contributor",
    "CreateProjectInput",
    "CreateTaskInput",
    "CreateUserStoryInput",
    "EpicSuggestion",
    "ExecutionResult",
    "HistoryStatistics",
    "HistorySummary",
    "ProjectProfile",
    "SecurityIssue",
    "Severity",
    "TaskBundle",
    "TaskItem",
    "TaskKind",
    "TaskStatus",
    "TrackerMember",
    "TrackerProject",
    "TrackerStatus",
    "TrackerUser",
    "TrackerUserStory",
]
