"""Task generators: one per source, sharing a single submission engine."""

from taigapilot.generators.base import TaskGenerator
from taigapilot.generators.code_review import CodeReviewGenerator
from taigapilot.generators.history import GitHistoryGenerator
from taigapilot.generators.roadmap import RoadmapGenerator

__all__ = [
    "CodeReviewGenerator",
    "GitHistoryGenerator",
    "RoadmapGenerator",
    "TaskGenerator",
]
