"""Models produced by the version-control history analyzer."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Commit(BaseModel):
    """A single parsed commit. Immutable once parsed."""

    hash: str
    date: str = ""
    message: str
    author: str = ""

    model_config = {"frozen": True}


class Branch(BaseModel):
    """A local or remote branch with its last-commit date."""

    name: str
    date: str = ""

    model_config = {"frozen": True}

    @property
    def is_feature(self) -> bool:
        """Whether the branch looks like a feature line of work."""
        return "feature/" in self.name or "feat/" in self.name or "develop" in self.name


class EpicSuggestion(BaseModel):
    """An epic candidate derived directly from history."""

    title: str
    description: str
    commits: list[Commit] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class Contributor(BaseModel):
    name: str
    commits: int


class HistorySummary(BaseModel):
    """Normalized output of one history analysis pass."""

    commits: list[Commit] = Field(default_factory=list)
    branches: list[Branch] = Field(default_factory=list)
    phases: dict[str, list[Commit]] = Field(default_factory=dict)


class HistoryStatistics(BaseModel):
    total_commits: int
    total_branches: int
    phases: int
    earliest: str | None = None
    latest: str | None = None
    top_contributors: list[Contributor] = Field(default_factory=list)
    phase_distribution: dict[str, int] = Field(default_factory=dict)
