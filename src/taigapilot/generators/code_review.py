"""Tasks derived from a static scan of the project's source tree.

The scan is bounded to the project root, skips dependency, build and backup
directories, and looks for untested, undocumented, overly long and
obviously insecure files. Findings are summarized as stories plus a capped
sample of per-file tasks.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from taigapilot.analyzers.result import SourceResult
from taigapilot.exceptions import SetupError
from taigapilot.generators.base import TaskGenerator
from taigapilot.models.enums import Severity, TaskKind, TaskStatus
from taigapilot.models.metrics import NO_TEST_DIRECTORY, CodeMetrics, SecurityIssue
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import TaskBundle, TaskItem

logger = logging.getLogger(__name__)

MAX_STORIES = 15
MAX_TASKS = 20
MAX_TEST_TASKS = 10
MAX_DOC_TASKS = 5
MAX_SECURITY_TASKS = 5
DOC_STORY_THRESHOLD = 10
SECURITY_SCAN_LIMIT = 100
LONG_FUNCTION_LINES = 50
MIN_NPM_SCRIPTS = 3

EXTENSIONS_BY_TYPE: dict[str, tuple[str, ...]] = {
    "laravel": (".php",),
    "react": (".js", ".jsx", ".ts", ".tsx"),
    "vue": (".js", ".vue", ".ts"),
    "node": (".js", ".ts", ".mjs"),
    "python": (".py",),
    "django": (".py", ".html"),
}
DEFAULT_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".php", ".py", ".java", ".go", ".rb")

SKIP_DIRECTORIES = frozenset(
    {
        "node_modules",
        "vendor",
        "dist",
        "build",
        ".git",
        ".idea",
        ".vscode",
        "coverage",
        ".next",
        "out",
        "__pycache__",
        "venv",
        "env",
        ".pytest_cache",
    }
)
BACKUP_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\*backup"),
    re.compile(r"backup$"),
    re.compile(r"^backup"),
    re.compile(r"\.backup"),
    re.compile(r"backup-\d+"),
)
TEST_DIRECTORIES = ("tests", "test", "__tests__", "spec")

_JSDOC_RE = re.compile(r"/\*\*[\s\S]*?\*/")
DOC_PATTERNS: dict[str, re.Pattern[str]] = {
    ".js": _JSDOC_RE,
    ".ts": _JSDOC_RE,
    ".jsx": _JSDOC_RE,
    ".tsx": _JSDOC_RE,
    ".php": _JSDOC_RE,
    ".py": re.compile(r'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\''),
}
_TESTABLE_SUFFIX_RE = re.compile(r"\.(js|ts|jsx|tsx|php|py)$")
_TEST_FILENAME_RE = re.compile(r"^test_|_test\.\w+$|\.(test|spec)\.\w+$|Test\.php$")
_FUNCTION_START_RE = re.compile(r"function\s+\w+|=>\s*{|^\s*\w+\s*\(")


@dataclass(frozen=True)
class SecurityCheck:
    name: str
    pattern: re.Pattern[str]
    severity: Severity


SECURITY_CHECKS: tuple[SecurityCheck, ...] = (
    SecurityCheck(
        "Hardcoded Credentials",
        re.compile(r"(password|api_key|secret)\s*=\s*['\"]", re.IGNORECASE),
        Severity.HIGH,
    ),
    SecurityCheck(
        "SQL Injection Risk",
        re.compile(r"\$_(GET|POST|REQUEST)\[.*?\].*?(SELECT|INSERT|UPDATE|DELETE)", re.IGNORECASE),
        Severity.CRITICAL,
    ),
    SecurityCheck("Eval Usage", re.compile(r"\beval\s*\("), Severity.HIGH),
)


def should_skip_directory(name: str) -> bool:
    """Dependency caches, build output, dot-directories and backups are never scanned."""
    if name in SKIP_DIRECTORIES or name.startswith("."):
        return True
    return any(pattern.search(name) for pattern in BACKUP_PATTERNS)


def has_documentation(content: str, suffix: str) -> bool:
    pattern = DOC_PATTERNS.get(suffix)
    if pattern is None:
        return True
    return pattern.search(content) is not None


def is_test_file(relative: Path) -> bool:
    """Whether *relative* (a path under the project root) is itself a test.

    A file counts when it sits in a test directory or follows a test naming
    convention (``test_x.py``, ``x_test.go``, ``x.test.js``, ``x.spec.ts``,
    ``XTest.php``).
    """
    if any(part.lower() in TEST_DIRECTORIES for part in relative.parts[:-1]):
        return True
    return _TEST_FILENAME_RE.search(relative.name) is not None


def has_long_function(content: str) -> bool:
    """Coarse check for a function body running past 50 lines.

    A run starts at a line that looks like a function header and ends at the
    first line containing ``}``. Nesting is not modeled.
    """
    length = 0
    in_function = False
    for line in content.split("\n"):
        if _FUNCTION_START_RE.search(line):
            in_function = True
            length = 0
        if in_function:
            length += 1
            if length > LONG_FUNCTION_LINES:
                return True
        if in_function and "}" in line:
            in_function = False
    return False


class CodeReviewGenerator(TaskGenerator):
    """Generate quality, testing, documentation and security work from a source scan."""

    name = "code-review"

    def __init__(self, project_path: Path, profile: ProjectProfile | None = None, **kwargs: Any) -> None:
        super().__init__(profile, **kwargs)
        root = Path(project_path).resolve()
        if not root.exists():
            raise SetupError(f"Project path does not exist: {root}")
        if not root.is_dir():
            raise SetupError(f"Project path is not a directory: {root}")
        self.project_path = root
        self.metrics = CodeMetrics()

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def relevant_extensions(self) -> tuple[str, ...]:
        project_type = self.profile.type if self.profile is not None else "unknown"
        return EXTENSIONS_BY_TYPE.get(project_type, DEFAULT_EXTENSIONS)

    def _within_root(self, path: Path) -> bool:
        return path.resolve().is_relative_to(self.project_path)

    def find_source_files(self) -> list[Path]:
        """Walk the tree under the project root, in a stable order."""
        extensions = self.relevant_extensions()
        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.project_path):
            current = Path(dirpath)
            dirnames[:] = sorted(
                name for name in dirnames if not should_skip_directory(name) and self._within_root(current / name)
            )
            for filename in sorted(filenames):
                path = current / filename
                if path.suffix in extensions and self._within_root(path):
                    files.append(path)
        return files

    @staticmethod
    def read_source(path: Path) -> SourceResult[str]:
        try:
            return SourceResult(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            return SourceResult.empty("", f"cannot read {path}: {exc}")

    def has_corresponding_test(self, path: Path) -> bool:
        """Look for ``.test.``/``.spec.`` siblings or a mirrored file under ``tests/``."""
        candidates: list[Path] = []
        if _TESTABLE_SUFFIX_RE.search(path.name):
            candidates.append(path.with_name(_TESTABLE_SUFFIX_RE.sub(r".test.\1", path.name)))
            candidates.append(path.with_name(_TESTABLE_SUFFIX_RE.sub(r".spec.\1", path.name)))
        if path.suffix == ".py":
            candidates.append(path.with_name(f"test_{path.name}"))
            candidates.append(self.project_path / "tests" / f"test_{path.name}")

        relative = path.relative_to(self.project_path)
        if len(relative.parts) > 1 and relative.parts[0] in ("src", "app"):
            candidates.append(self.project_path.joinpath("tests", *relative.parts[1:]))

        return any(candidate.exists() for candidate in candidates)

    def analyze(self) -> CodeMetrics:
        """Scan the tree once and return the aggregated :class:`CodeMetrics`."""
        metrics = CodeMetrics()
        sources = self.find_source_files()
        metrics.total_files = len(sources)
        scanned: list[tuple[Path, str]] = []

        for path in sources:
            read = self.read_source(path)
            if not read.ok:
                logger.warning("Skipping unreadable file: %s", read.diagnostic)
                continue
            content = read.value
            metrics.lines_of_code += len(content.split("\n"))
            relative = path.relative_to(self.project_path)
            if not is_test_file(relative) and not self.has_corresponding_test(path):
                metrics.files_without_tests.append(path)
            if not has_documentation(content, path.suffix):
                metrics.files_without_docs.append(path)
            if has_long_function(content):
                metrics.complexity_issues.append(path)
            if len(scanned) < SECURITY_SCAN_LIMIT:
                scanned.append((path, content))

        if not any((self.project_path / name).exists() for name in TEST_DIRECTORIES):
            metrics.files_without_tests.append(NO_TEST_DIRECTORY)

        for path, content in scanned:
            for check in SECURITY_CHECKS:
                if check.pattern.search(content):
                    metrics.security_issues.append(SecurityIssue(file=path, issue=check.name, severity=check.severity))

        metrics.dependency_issues.extend(self.check_dependencies())
        self.metrics = metrics
        logger.info(
            "Scanned %d files (%d lines) under %s", metrics.total_files, metrics.lines_of_code, self.project_path
        )
        return metrics

    def _load_manifest(self, name: str) -> dict | None:
        path = self.project_path / name
        if not path.is_file():
            return None
        read = self.read_source(path)
        if not read.ok:
            logger.warning("Skipping manifest: %s", read.diagnostic)
            return None
        try:
            data = json.loads(read.value)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring invalid %s: %s", name, exc)
            return None
        return data if isinstance(data, dict) else None

    def check_dependencies(self) -> list[str]:
        issues: list[str] = []
        package = self._load_manifest("package.json")
        if package is not None and len(package.get("scripts") or {}) < MIN_NPM_SCRIPTS:
            issues.append("Missing npm scripts")
        composer = self._load_manifest("composer.json")
        if composer is not None and not composer.get("autoload"):
            issues.append("Missing composer autoload")
        return issues

    # ------------------------------------------------------------------
    # Task synthesis
    # ------------------------------------------------------------------

    def generate_tasks(self) -> TaskBundle:
        metrics = self.analyze()
        stories: list[TaskItem] = []
        tasks: list[TaskItem] = []

        for build in (
            self._testing_work,
            self._documentation_work,
            self._security_work,
            self._quality_work,
            self._framework_work,
        ):
            new_stories, new_tasks = build(metrics)
            stories.extend(new_stories)
            tasks.extend(new_tasks)

        return TaskBundle(epics=[], user_stories=stories[:MAX_STORIES], tasks=tasks[:MAX_TASKS])

    def _story(self, title: str, description: str, tags: list[str]) -> TaskItem:
        return TaskItem(kind=TaskKind.STORY, title=title, description=description, status=TaskStatus.NEW, tags=tags)

    def _task(self, title: str, description: str, tags: list[str]) -> TaskItem:
        return TaskItem(kind=TaskKind.TASK, title=title, description=description, status=TaskStatus.NEW, tags=tags)

    def _testing_work(self, metrics: CodeMetrics) -> tuple[list[TaskItem], list[TaskItem]]:
        stories: list[TaskItem] = []
        if metrics.missing_test_directory:
            stories.append(
                self._story(
                    "Set up testing infrastructure",
                    self.format_description(
                        "**User Story:** As a developer, I would like to have a comprehensive testing "
                        "infrastructure so that I can ensure code quality and prevent regressions.\n\n"
                        "**Current State:** No test directory found\n\n"
                        "**Acceptance Criteria:**\n"
                        "- Set up testing framework (Jest, PHPUnit, pytest, etc.)\n"
                        "- Create test directory structure\n"
                        "- Add test scripts to package.json/composer.json\n"
                        "- Configure CI/CD for automated testing",
                        source="Code Review Analysis",
                        files=["Project Root"],
                    ),
                    self.generate_tags("testing infrastructure", "testing"),
                )
            )

        tasks = [
            self._task(
                f"Add tests for {path.name}",
                self.format_description(
                    f"Create unit tests for {path.name}\n\n"
                    f"**File:** {path}\n"
                    "**Suggested Tests:**\n"
                    "- Happy path scenarios\n"
                    "- Edge cases\n"
                    "- Error handling",
                    source="Code Review Analysis",
                    files=[path],
                ),
                self.generate_tags("testing", "testing"),
            )
            for path in metrics.untested_files()[:MAX_TEST_TASKS]
        ]
        return stories, tasks

    def _documentation_work(self, metrics: CodeMetrics) -> tuple[list[TaskItem], list[TaskItem]]:
        undocumented = metrics.files_without_docs
        stories: list[TaskItem] = []
        if len(undocumented) > DOC_STORY_THRESHOLD:
            stories.append(
                self._story(
                    "Improve code documentation",
                    self.format_description(
                        "**User Story:** As a developer, I would like comprehensive code documentation so "
                        "that new team members can understand the codebase quickly.\n\n"
                        f"**Current State:** {len(undocumented)} files lack proper documentation\n\n"
                        "**Acceptance Criteria:**\n"
                        "- Add JSDoc/PHPDoc/docstrings to all public functions\n"
                        "- Document complex algorithms and business logic\n"
                        "- Generate API documentation",
                        source="Code Review Analysis",
                        files=["Multiple files - see individual tasks"],
                    ),
                    self.generate_tags("documentation", "documentation"),
                )
            )
        tasks = [
            self._task(
                f"Document {path.name}",
                self.format_description(f"Add documentation to {path.name}", source="Code Review Analysis", files=[path]),
                self.generate_tags("documentation", "documentation"),
            )
            for path in undocumented[:MAX_DOC_TASKS]
        ]
        return stories, tasks

    def _security_work(self, metrics: CodeMetrics) -> tuple[list[TaskItem], list[TaskItem]]:
        critical = [issue for issue in metrics.security_issues if issue.severity is Severity.CRITICAL]
        high = [issue for issue in metrics.security_issues if issue.severity is Severity.HIGH]
        stories: list[TaskItem] = []
        if critical:
            listing = "\n".join(f"- {issue.issue} in {issue.file.name}" for issue in critical)
            stories.append(
                self._story(
                    "Fix critical security issues",
                    self.format_description(
                        "**User Story:** As a security-conscious developer, I would like all critical security "
                        "vulnerabilities fixed so that the application is protected from attacks.\n\n"
                        f"**Critical Issues Found:** {len(critical)}\n\n**Issues:**\n{listing}",
                        source="Security Analysis",
                        files=[issue.file for issue in critical],
                    ),
                    ["security", "critical", "bug"],
                )
            )
        tasks = [
            self._task(
                f"Security: Fix {issue.issue}",
                self.format_description(
                    f"Fix {issue.issue} in {issue.file.name}", source="Security Analysis", files=[issue.file]
                ),
                ["security", "high-priority"],
            )
            for issue in high[:MAX_SECURITY_TASKS]
        ]
        return stories, tasks

    def _quality_work(self, metrics: CodeMetrics) -> tuple[list[TaskItem], list[TaskItem]]:
        if not metrics.complexity_issues:
            return [], []
        story = self._story(
            "Refactor complex functions",
            self.format_description(
                "**User Story:** As a maintainer, I would like complex functions refactored into smaller, "
                "more manageable pieces so that the code is easier to understand and maintain.\n\n"
                f"**Files with complexity issues:** {len(metrics.complexity_issues)}\n\n"
                "**Acceptance Criteria:**\n"
                "- Break down large functions into smaller ones\n"
                "- Extract reusable logic\n"
                "- Follow Single Responsibility Principle",
                source="Code Quality Analysis",
                files=metrics.complexity_issues,
            ),
            self.generate_tags("refactoring", "refactoring"),
        )
        return [story], []

    def _framework_work(self, metrics: CodeMetrics) -> tuple[list[TaskItem], list[TaskItem]]:
        project_type = self.profile.type if self.profile is not None else "unknown"
        if project_type == "laravel":
            return [], [
                self._task(
                    "Implement Laravel Policies",
                    self.format_description(
                        "Add authorization policies for models using Laravel Policy classes",
                        source="Framework Best Practices",
                    ),
                    ["laravel", "security", "medium-priority"],
                ),
                self._task(
                    "Add Form Request Validation",
                    self.format_description(
                        "Extract validation logic into Form Request classes", source="Framework Best Practices"
                    ),
                    ["laravel", "validation", "low-priority"],
                ),
            ]
        if project_type == "react":
            return [], [
                self._task(
                    "Add PropTypes/TypeScript Validation",
                    self.format_description(
                        "Add prop validation to all React components", source="Framework Best Practices"
                    ),
                    ["react", "validation", "medium-priority"],
                )
            ]
        return [], []
