"""Version-control history analysis.

Turns ``git log`` / ``git branch`` output into :class:`Commit` and
:class:`Branch` models and buckets commits into thematic phases. Every git
invocation is best-effort: a failure yields an empty result with a
diagnostic, never an exception.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections import Counter
from datetime import date
from pathlib import Path

from taigapilot.analyzers.result import SourceResult
from taigapilot.models.history import (
    Branch,
    Commit,
    Contributor,
    EpicSuggestion,
    HistoryStatistics,
    HistorySummary,
)

logger = logging.getLogger(__name__)

OTHER_PHASE = "Other"

_LOG_ARGS = ["--no-pager", "log", "--pretty=format:%h|%ad|%s|%an", "--date=short", "--all"]
_BRANCH_ARGS = ["branch", "-a", "--format=%(refname:short)|%(committerdate:short)"]
_REMOTE_PREFIX = "origin/"
_GIT_TIMEOUT_SECONDS = 30


def _patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


# Order is significant: a message matching several phases lands in the first.
PHASE_PATTERNS: tuple[tuple[str, tuple[re.Pattern[str], ...]], ...] = (
    (
        "Authentication & Authorization",
        _patterns(r"auth", r"login", r"token", r"sanctum", r"jwt", r"permission", r"role", r"policy"),
    ),
    ("Core Features", _patterns(r"feature", r"implement", r"add.*feature", r"new.*functionality")),
    (
        "Database & Models",
        _patterns(r"model", r"migration", r"schema", r"database", r"eloquent", r"seed", r"factory"),
    ),
    (
        "API Development",
        _patterns(r"api", r"endpoint", r"route", r"controller", r"request", r"response", r"rest"),
    ),
    (
        "Frontend Integration",
        _patterns(r"frontend", r"ui", r"component", r"view", r"template", r"css", r"js", r"react", r"vue"),
    ),
    (
        "Testing & Quality",
        _patterns(r"test", r"spec", r"coverage", r"quality", r"lint", r"format", r"phpunit", r"jest"),
    ),
    (
        "Performance & Optimization",
        _patterns(r"performance", r"optimize", r"cache", r"queue", r"speed", r"memory", r"n\+1"),
    ),
    (
        "Deployment & Infrastructure",
        _patterns(r"deploy", r"docker", r"ci/cd", r"build", r"production", r"staging", r"env", r"config"),
    ),
    (
        "Bug Fixes & Maintenance",
        _patterns(r"fix", r"bug", r"hotfix", r"patch", r"repair", r"resolve", r"issue"),
    ),
    ("Documentation", _patterns(r"doc", r"readme", r"comment", r"documentation", r"guide", r"wiki")),
)


def classify_message(message: str) -> str:
    """Return the first phase whose patterns match *message*, else ``"Other"``."""
    for phase, patterns in PHASE_PATTERNS:
        if any(pattern.search(message) for pattern in patterns):
            return phase
    return OTHER_PHASE


def bucket_by_phase(commits: list[Commit]) -> dict[str, list[Commit]]:
    """Assign every commit to exactly one phase; empty phases are dropped.

    The returned mapping follows the fixed phase table order with
    ``"Other"`` last.
    """
    buckets: dict[str, list[Commit]] = {phase: [] for phase, _ in PHASE_PATTERNS}
    buckets[OTHER_PHASE] = []
    for commit in commits:
        buckets[classify_message(commit.message)].append(commit)
    return {phase: members for phase, members in buckets.items() if members}


def top_contributors(commits: list[Commit], n: int = 5) -> list[Contributor]:
    """Count commits per author; ties keep first-seen order."""
    tally: Counter[str] = Counter()
    for commit in commits:
        if commit.author:
            tally[commit.author] += 1
    ranked = sorted(tally.items(), key=lambda entry: entry[1], reverse=True)
    return [Contributor(name=name, commits=count) for name, count in ranked[:n]]


def parse_log(output: str) -> list[Commit]:
    """Parse ``hash|date|subject|author`` lines, dropping incomplete ones."""
    commits: list[Commit] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("|", 2)
        if len(parts) < 3:
            continue
        commit_hash, commit_date, rest = (part.strip() for part in parts)
        message, _, author = rest.rpartition("|") if "|" in rest else (rest, "", "")
        message = message.strip()
        if not commit_hash or not message:
            continue
        commits.append(Commit(hash=commit_hash, date=commit_date, message=message, author=author.strip()))
    return commits


def parse_branches(output: str) -> list[Branch]:
    """Parse ``name|date`` lines, stripping the remote prefix and symbolic refs."""
    branches: list[Branch] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        name, _, branch_date = line.partition("|")
        name = name.strip().removeprefix(_REMOTE_PREFIX)
        if not name or name.startswith("HEAD") or name == _REMOTE_PREFIX.rstrip("/"):
            continue
        branches.append(Branch(name=name, date=branch_date.strip()))
    return branches


class HistoryAnalyzer:
    """Best-effort analyzer over the git history of *project_path*."""

    def __init__(self, project_path: Path) -> None:
        self.project_path = Path(project_path)
        self._summary: HistorySummary | None = None

    def _run_git(self, args: list[str]) -> SourceResult[str]:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.project_path,
                capture_output=True,
                text=True,
                timeout=_GIT_TIMEOUT_SECONDS,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            return SourceResult.empty("", f"git invocation failed: {exc}")
        if result.returncode != 0:
            return SourceResult.empty("", f"git exited with {result.returncode}: {result.stderr.strip()}")
        return SourceResult(result.stdout)

    def collect_commits(self) -> SourceResult[list[Commit]]:
        """List all commits across all refs."""
        raw = self._run_git(_LOG_ARGS)
        if not raw.ok:
            logger.warning("Failed to read git history in %s: %s", self.project_path, raw.diagnostic)
            return SourceResult.empty([], raw.diagnostic or "git log failed")
        return SourceResult(parse_log(raw.value))

    def collect_branches(self) -> SourceResult[list[Branch]]:
        """List local and remote branches with their last-commit date."""
        raw = self._run_git(_BRANCH_ARGS)
        if not raw.ok:
            logger.warning("Failed to list git branches in %s: %s", self.project_path, raw.diagnostic)
            return SourceResult.empty([], raw.diagnostic or "git branch failed")
        return SourceResult(parse_branches(raw.value))

    def analyze(self) -> HistorySummary:
        """Collect commits and branches and bucket commits into phases."""
        commits = self.collect_commits().value
        branches = self.collect_branches().value
        self._summary = HistorySummary(commits=commits, branches=branches, phases=bucket_by_phase(commits))
        return self._summary

    @property
    def summary(self) -> HistorySummary:
        if self._summary is None:
            return self.analyze()
        return self._summary

    def bucket_by_phase(self) -> dict[str, list[Commit]]:
        return self.summary.phases

    def top_contributors(self, n: int = 5) -> list[Contributor]:
        return top_contributors(self.summary.commits, n)

    def feature_branches(self) -> list[Branch]:
        return [branch for branch in self.summary.branches if branch.is_feature]

    def commits_between(self, start: str, end: str) -> list[Commit]:
        """Commits dated within ``[start, end]`` (ISO dates, inclusive)."""
        first, last = date.fromisoformat(start), date.fromisoformat(end)
        selected: list[Commit] = []
        for commit in self.summary.commits:
            try:
                committed = date.fromisoformat(commit.date)
            except ValueError:
                continue
            if first <= committed <= last:
                selected.append(commit)
        return selected

    def suggest_epics(self) -> list[EpicSuggestion]:
        """One epic per phase with 3+ commits, plus one per feature branch."""
        epics: list[EpicSuggestion] = []
        for phase, commits in self.summary.phases.items():
            if len(commits) < 3:
                continue
            epics.append(
                EpicSuggestion(
                    title=phase,
                    description=f"Phase containing {len(commits)} commits",
                    commits=commits[:10],
                    tags=[re.sub(r"\s+", "-", phase.lower()), "git-history"],
                )
            )
        for branch in self.feature_branches():
            name = re.sub(r"[-_]", " ", branch.name.replace("feature/", "", 1))
            epics.append(
                EpicSuggestion(
                    title=f"Feature: {name}",
                    description=f"Feature branch completed on {branch.date}",
                    tags=["feature-branch", "git-history"],
                )
            )
        return epics

    def statistics(self) -> HistoryStatistics:
        summary = self.summary
        commits = summary.commits
        return HistoryStatistics(
            total_commits=len(commits),
            total_branches=len(summary.branches),
            phases=len(summary.phases),
            earliest=commits[-1].date if commits else None,
            latest=commits[0].date if commits else None,
            top_contributors=top_contributors(commits),
            phase_distribution={phase: len(members) for phase, members in summary.phases.items()},
        )
