"""Public API surface for taigapilot."""

__version__ = "0.1.0"

from taigapilot.analyzers import HistoryAnalyzer, ProjectDiscovery, SourceResult
from taigapilot.assign import AssignmentPlan, AssignmentReport, apply_assignment, plan_assignment
from taigapilot.config import NewProjectSpec, RunConfig, TrackerSettings
from taigapilot.exceptions import (
    AuthenticationError,
    ConfigError,
    SetupError,
    SourceReadError,
    TaigaPilotError,
    TrackerError,
)
from taigapilot.generators import CodeReviewGenerator, GitHistoryGenerator, RoadmapGenerator, TaskGenerator
from taigapilot.models import ExecutionResult, ProjectProfile, TaskBundle, TaskItem, TaskKind, TaskStatus
from taigapilot.pipeline import PlannedSource, build_generators, plan_sources, resolve_project, run_pipeline
from taigapilot.progress import NullSubmitProgress, SubmitProgress
from taigapilot.tracker import AuthSession, TaigaClient, Tracker

__all__ = [
    "AssignmentPlan",
    "AssignmentReport",
    "AuthSession",
    "AuthenticationError",
    "CodeReviewGenerator",
    "ConfigError",
    "ExecutionResult",
    "GitHistoryGenerator",
    "HistoryAnalyzer",
    "NewProjectSpec",
    "NullSubmitProgress",
    "PlannedSource",
    "ProjectDiscovery",
    "ProjectProfile",
    "RoadmapGenerator",
    "RunConfig",
    "SetupError",
    "SourceReadError",
    "SourceResult",
    "SubmitProgress",
    "TaigaClient",
    "TaigaPilotError",
    "TaskBundle",
    "TaskGenerator",
    "TaskItem",
    "TaskKind",
    "TaskStatus",
    "Tracker",
    "TrackerError",
    "TrackerSettings",
    "__version__",
    "apply_assignment",
    "build_generators",
    "plan_assignment",
    "plan_sources",
    "resolve_project",
    "run_pipeline",
]
