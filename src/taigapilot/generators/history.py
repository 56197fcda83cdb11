"""Tasks derived from version-control history.

Phases become epics, feature branches become stories and significant
commits become tasks (one per commit, or one daily summary per date when
several land on the same day). Everything here is completed work.
"""

from __future__ import annotations

import re
from typing import Any

from taigapilot.analyzers.history import HistoryAnalyzer
from taigapilot.generators.base import TaskGenerator
from taigapilot.generators.sanitize import MAX_COMMIT_TITLE_LENGTH, sanitize_commit_message, truncate
from taigapilot.models.enums import TaskKind, TaskStatus
from taigapilot.models.history import Branch, Commit
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import TaskBundle, TaskItem

MIN_EPIC_COMMITS = 2
EPIC_COMMITS_SHOWN = 8
DAILY_COMMITS_SHOWN = 5
MAX_TASKS = 20
LONG_MESSAGE_LENGTH = 30

TRIVIAL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^(fix|fixed) typo",
        r"^update",
        r"^minor",
        r"^small",
        r"^cleanup",
        r"^style",
        r"^comment",
        r"^remove comment",
        r"^formatting",
        r"^lint",
        r"test file",
        r"debug",
        r"wip",
    )
)

SIGNIFICANT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^(add|added|implement|create|build)",
        r"^(fix|fixed|resolve|solve)",
        r"^(feature|feat)",
        r"^(refactor|restructure)",
        r"^(improve|enhance|optimize)",
        r"complete",
        r"finish",
    )
)

# Tried in order for every commit of a day; the first three distinct hits
# name the daily summary.
DAILY_TOPICS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Authentication", re.compile(r"auth|login|jwt|token|session")),
    ("API", re.compile(r"api")),
    ("Database", re.compile(r"database|model")),
    ("Frontend", re.compile(r"\bui\b|frontend")),
    ("Testing", re.compile(r"test")),
    ("Deployment", re.compile(r"deploy|build")),
    ("Bug Fixes", re.compile(r"fix|bug")),
    ("Features", re.compile(r"feature|implement")),
)
MAX_DAILY_TOPICS = 3

_BRANCH_PREFIX_RE = re.compile(r"^(feature/|feat/|develop)")


def is_significant(commit: Commit) -> bool:
    """Whether a commit represents real work.

    The trivial-pattern denylist always wins; survivors need an action
    keyword or a message longer than 30 characters.
    """
    message = commit.message.lower()
    if any(pattern.search(message) for pattern in TRIVIAL_PATTERNS):
        return False
    if any(pattern.search(message) for pattern in SIGNIFICANT_PATTERNS):
        return True
    return len(commit.message) > LONG_MESSAGE_LENGTH


def group_by_date(commits: list[Commit]) -> dict[str, list[Commit]]:
    grouped: dict[str, list[Commit]] = {}
    for commit in commits:
        grouped.setdefault(commit.date, []).append(commit)
    return grouped


def extract_topics(commits: list[Commit]) -> list[str]:
    topics: list[str] = []
    for commit in commits:
        message = commit.message.lower()
        for topic, pattern in DAILY_TOPICS:
            if topic not in topics and pattern.search(message):
                topics.append(topic)
    return topics[:MAX_DAILY_TOPICS]


def feature_name(branch: Branch) -> str:
    """``feature/user-login`` -> ``User Login``; a bare ``develop`` keeps its name."""
    name = _BRANCH_PREFIX_RE.sub("", branch.name)
    name = re.sub(r"[-_]", " ", name).strip() or branch.name
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), name)


class GitHistoryGenerator(TaskGenerator):
    """Generate a bundle from the history collected by a :class:`HistoryAnalyzer`."""

    name = "git-history"

    def __init__(self, analyzer: HistoryAnalyzer, profile: ProjectProfile | None = None, **kwargs: Any) -> None:
        super().__init__(profile, **kwargs)
        self.analyzer = analyzer

    def generate_tasks(self) -> TaskBundle:
        summary = self.analyzer.analyze()
        return TaskBundle(
            epics=self.create_phase_epics(summary.phases),
            user_stories=self.create_feature_stories(self.analyzer.feature_branches()),
            tasks=self.create_commit_tasks(summary.commits),
        )

    def create_phase_epics(self, phases: dict[str, list[Commit]]) -> list[TaskItem]:
        epics: list[TaskItem] = []
        for phase, commits in phases.items():
            if len(commits) < MIN_EPIC_COMMITS:
                continue
            description = self.format_description(
                f"Development phase containing {len(commits)} commits.\n\n"
                f"This phase represents completed work in the {phase.lower()} area of the project.",
                source="Git History Analysis",
                commits=commits[:EPIC_COMMITS_SHOWN],
            )
            epics.append(
                TaskItem(
                    kind=TaskKind.EPIC,
                    title=f"Epic: {phase}",
                    description=description,
                    status=TaskStatus.COMPLETED,
                    tags=self.generate_tags(phase, "epic-git-phase"),
                )
            )
        return epics

    def create_feature_stories(self, branches: list[Branch]) -> list[TaskItem]:
        stories: list[TaskItem] = []
        for branch in branches:
            name = feature_name(branch)
            description = self.format_description(
                "Feature branch representing completed functionality.\n\n"
                f"This feature was developed on branch `{branch.name}` and completed on {branch.date}.",
                source="Git Branch Analysis",
                date=branch.date,
            )
            stories.append(
                TaskItem(
                    kind=TaskKind.STORY,
                    title=f"Feature: {name}",
                    description=description,
                    status=TaskStatus.COMPLETED,
                    tags=self.generate_tags(name, "feature-branch"),
                )
            )
        return stories

    def create_commit_tasks(self, commits: list[Commit]) -> list[TaskItem]:
        significant = [commit for commit in commits if is_significant(commit)]
        tasks: list[TaskItem] = []
        for day, day_commits in group_by_date(significant).items():
            if len(day_commits) == 1:
                tasks.append(self._commit_task(day, day_commits[0]))
            else:
                tasks.append(self._daily_task(day, day_commits))
        return tasks[:MAX_TASKS]

    def _commit_task(self, day: str, commit: Commit) -> TaskItem:
        description = self.format_description(
            f"Significant development work completed on {day}.\n\n**Commit Message:** {commit.message}",
            source="Git Commit Analysis",
            date=commit.date,
            author=commit.author,
            commits=[commit],
        )
        return TaskItem(
            kind=TaskKind.TASK,
            title=sanitize_commit_message(commit.message),
            description=description,
            status=TaskStatus.COMPLETED,
            tags=self.generate_tags(commit.message, "git-commit"),
            author=commit.author or None,
        )

    def _daily_task(self, day: str, commits: list[Commit]) -> TaskItem:
        topics = extract_topics(commits) or ["General"]
        description = self.format_description(
            f"Multiple development tasks completed on {day}.\n\nTotal commits: {len(commits)}",
            source="Git Daily Summary",
            date=day,
            commits=commits[:DAILY_COMMITS_SHOWN],
        )
        title = f"Daily Development: {', '.join(topics)}"
        return TaskItem(
            kind=TaskKind.TASK,
            title=truncate(title, MAX_COMMIT_TITLE_LENGTH),
            description=description,
            status=TaskStatus.COMPLETED,
            tags=self.generate_tags(" ".join(topics), "daily-summary"),
        )
