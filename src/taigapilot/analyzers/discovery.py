"""Shallow project fingerprinting.

Looks only at the top level of a project directory (plus a few explicit
relative-path probes) to decide its type/framework and to locate roadmap
and documentation files. File contents are never read.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from taigapilot.analyzers.result import SourceResult
from taigapilot.models.project import ProjectProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameworkSignature:
    type: str
    framework: str
    indicators: tuple[str, ...]


# Order is the tie-break: the first signature with two matching indicators wins.
FRAMEWORK_SIGNATURES: tuple[FrameworkSignature, ...] = (
    FrameworkSignature("laravel", "Laravel", ("artisan", "composer.json", "app/Http", "routes/web.php")),
    FrameworkSignature("react", "React", ("package.json", "src/App.js", "public/index.html")),
    FrameworkSignature("vue", "Vue.js", ("package.json", "vue.config.js", "src/main.js")),
    FrameworkSignature("node", "Node.js", ("package.json", "server.js", "app.js", "index.js")),
    FrameworkSignature("python", "Python", ("requirements.txt", "setup.py", "main.py", "app.py")),
    FrameworkSignature("docker", "Docker", ("Dockerfile", "docker-compose.yml")),
)

# Coarse fallback when no signature matches: a single well-known manifest.
FALLBACK_MANIFESTS: tuple[tuple[str, str, str], ...] = (
    ("package.json", "javascript", "JavaScript"),
    ("composer.json", "php", "PHP"),
)

DOCUMENTATION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"readme\.md",
        r"roadmap\.md",
        r"project[_-]?roadmap\.md",
        r"changelog\.md",
        r"todo\.md",
        r"features\.md",
        r"architecture\.md",
        r"design\.md",
    )
)
_ROADMAP_RE = re.compile(r"roadmap|todo|features", re.IGNORECASE)

PACKAGE_FILES = ("package.json", "composer.json", "requirements.txt", "Pipfile", "Cargo.toml", "go.mod")
CONFIG_FILES = (
    "webpack.config.js",
    "vite.config.js",
    "next.config.js",
    "nuxt.config.js",
    "vue.config.js",
    "angular.json",
    ".env",
    ".env.example",
)

_SUGGESTED_TASKS: dict[str, tuple[str, ...]] = {
    "laravel": (
        "Review and implement missing Policies",
        "Add comprehensive test coverage",
        "Optimize database queries (N+1 prevention)",
        "Add API documentation",
        "Implement queue monitoring",
        "Add security audit tasks",
    ),
    "react": (
        "Add component unit tests",
        "Implement accessibility improvements",
        "Optimize bundle size",
        "Add error boundaries",
        "Implement performance monitoring",
    ),
    "node": (
        "Add API endpoint tests",
        "Implement error handling middleware",
        "Add request validation",
        "Optimize database connections",
        "Add security headers",
    ),
}


class ProjectDiscovery:
    """Fingerprint the codebase rooted at *project_path*."""

    def __init__(self, project_path: Path) -> None:
        self.project_path = Path(project_path)
        self._profile: ProjectProfile | None = None

    def list_files(self) -> SourceResult[list[str]]:
        try:
            names = sorted(entry.name for entry in self.project_path.iterdir())
        except OSError as exc:
            return SourceResult.empty([], f"cannot list {self.project_path}: {exc}")
        return SourceResult(names)

    def _indicator_present(self, indicator: str, files: list[str]) -> bool:
        if "/" in indicator:
            return (self.project_path / indicator).exists()
        return indicator in files

    def detect_type(self, files: list[str]) -> tuple[str, str | None]:
        """Return ``(type, framework)`` for the given top-level listing."""
        for signature in FRAMEWORK_SIGNATURES:
            matches = [ind for ind in signature.indicators if self._indicator_present(ind, files)]
            if len(matches) >= 2:
                return signature.type, signature.framework
        for manifest, project_type, framework in FALLBACK_MANIFESTS:
            if manifest in files:
                return project_type, framework
        return "unknown", None

    @staticmethod
    def find_documentation(files: list[str]) -> list[str]:
        return [name for name in files if any(pattern.search(name) for pattern in DOCUMENTATION_PATTERNS)]

    def find_roadmaps(self, documentation: list[str]) -> list[Path]:
        return [self.project_path / name for name in documentation if _ROADMAP_RE.search(name)]

    @staticmethod
    def find_package_files(files: list[str]) -> list[str]:
        return [name for name in files if name in PACKAGE_FILES]

    @staticmethod
    def find_config_files(files: list[str]) -> list[str]:
        return [name for name in files if name in CONFIG_FILES]

    def analyze(self) -> ProjectProfile:
        """Build the :class:`ProjectProfile`; an unreadable root yields an unknown profile."""
        listing = self.list_files()
        if not listing.ok:
            logger.warning("Project discovery skipped: %s", listing.diagnostic)
            self._profile = ProjectProfile()
            return self._profile

        files = listing.value
        project_type, framework = self.detect_type(files)
        documentation = self.find_documentation(files)
        roadmaps = self.find_roadmaps(documentation)
        self._profile = ProjectProfile(
            type=project_type,
            framework=framework,
            has_version_control=".git" in files,
            has_roadmap=bool(roadmaps),
            roadmap_files=roadmaps,
            documentation_files=documentation,
            package_files=self.find_package_files(files),
            config_files=self.find_config_files(files),
        )
        return self._profile

    @property
    def profile(self) -> ProjectProfile:
        if self._profile is None:
            return self.analyze()
        return self._profile

    def suggested_tasks(self) -> list[str]:
        """Framework-specific focus areas worth tracking for this project type."""
        return list(_SUGGESTED_TASKS.get(self.profile.type, ()))
