"""Source analyzers: turn raw external sources into in-memory summaries."""

from taigapilot.analyzers.discovery import ProjectDiscovery
from taigapilot.analyzers.history import PHASE_PATTERNS, HistoryAnalyzer
from taigapilot.analyzers.result import SourceResult

__all__ = ["PHASE_PATTERNS", "HistoryAnalyzer", "ProjectDiscovery", "SourceResult"]
