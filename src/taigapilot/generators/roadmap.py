"""Tasks derived from a markdown planning document.

``### Phase N`` headings become epics, ``####`` feature headings that look
like real work become stories, and checkbox / TODO / numbered action lines
become tasks.

Section boundaries are found with line-anchored heading regexes, not a
markdown parser. Fenced code blocks are blanked out (same length, newlines
kept) before any heading or action line is searched for, so example
markdown inside a fence is never mistaken for structure. Bullets and code
blocks are read back from the original text using the same offsets.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from taigapilot.exceptions import SourceReadError
from taigapilot.generators.base import TaskGenerator
from taigapilot.generators.sanitize import sanitize_title
from taigapilot.models.enums import TaskKind, TaskStatus
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import TaskBundle, TaskItem

logger = logging.getLogger(__name__)

MAX_PHASE_BULLETS = 8
MAX_FEATURE_BULLETS = 5
MAX_FEATURES = 15
MAX_TASKS = 20
FEATURE_BODY_CAP = 500
CODE_SNIPPET_LENGTH = 300
MIN_CANDIDATE_LENGTH = 10

DONE_GLYPH = "✅"
IN_PROGRESS_GLYPH = "🚧"

_FENCE_RE = re.compile(r"^[ \t]*(```|~~~)[^\n]*\n.*?^[ \t]*\1[^\n]*$", re.MULTILINE | re.DOTALL)
_NON_NEWLINE_RE = re.compile(r"[^\n]")

_PHASE_RE = re.compile(
    r"^#{2,3}[ \t]+[* \t]*[✅🚧📋⚡🎨🎯🔄🌐]?\ufe0f?[ \t]*"
    r"(?P<title>Phase[ \t]+(?P<number>\d+)[^:\n]*):?[ \t]*(?P<subtitle>[^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)
_FEATURE_RE = re.compile(
    r"^####[ \t]+[* \t]*[✨🔧📊🎨⚡✅🚧]?\ufe0f?[ \t]*(?P<title>[^:\n]+):?[ \t]*(?P<subtitle>[^\n]*)$",
    re.MULTILINE,
)
# A feature ends at the next heading of its own level or higher.
_FEATURE_END_RE = re.compile(r"^#{1,4}[ \t]", re.MULTILINE)

_GOAL_RE = re.compile(r"\*\*Goal:\*\*\s*([^\n]+)", re.IGNORECASE)
_TIMELINE_RE = re.compile(r"\*\*Timeline:\*\*\s*([^\n]+)", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*[-*•]\s+(.+)$")
_CODE_BLOCK_RE = re.compile(r"```[^\n]*\n([\s\S]*?)```")

# Applied in order over the whole document; results are concatenated.
_ACTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[ \t]*[-*][ \t]+\[[ xX]\][ \t]+(?P<title>[^\n]+)$", re.MULTILINE),
    re.compile(
        r"^[ \t]*[-*][ \t]+(?:TODO:?|FIXME:?|ACTION:|NEXT:)[ \t]+(?P<title>[^\n]+)$",
        re.IGNORECASE | re.MULTILINE,
    ),
    re.compile(r"^[ \t]*\d+\.[ \t]+\*\*(?P<title>.+?)\*\*:[ \t]+(?P<detail>[^\n]+)$", re.MULTILINE),
)
_CHECKED_RE = re.compile(r"\[[xX]\]")

FEATURE_SKIP_WORDS = (
    "phase",
    "next steps",
    "what we built",
    "features implemented",
    "key features",
    "current state",
    "success criteria",
    "technical details",
    "for solo",
    "for multi",
    "real-world",
    "the breakthrough",
    "results achieved",
    "key insights",
    "the vision",
    "architectural revolution",
    "meta-achievement",
    "universal questions",
    "agent core",
    "intelligence features",
    "task generation",
    "documentation",
    "integration",
    "benefits",
    "impact",
    "lessons learned",
    "foundation",
    "success",
    "architecture",
)

WORK_INDICATORS = (
    "implement", "create", "build", "add", "develop", "design",
    "refactor", "fix", "update", "improve", "enhance", "optimize",
    "integrate", "deploy", "test", "configure", "setup", "install",
    "generator", "analyzer", "parser", "handler", "manager", "service",
    "api", "database", "interface", "component", "module", "system",
    "authentication", "authorization", "validation", "migration",
)

STATUS_DESCRIPTION_WORDS = (
    "solid",
    "success",
    "ready",
    "complete",
    "working",
    "architecture",
    "experience",
    "preservation",
    "creation",
    "management",
    "tracking",
    "visibility",
)
_ACTION_VERB_RE = re.compile(r"implement|create|add|fix|refactor|test", re.IGNORECASE)

_COMPLETED_MARKERS = re.compile(r"✅|\[[xX]\]|\bDONE\b|\bCOMPLETED?\b", re.IGNORECASE)
_IN_PROGRESS_MARKERS = re.compile(r"🚧|\bWIP\b|\bIN PROGRESS\b|\bSTARTED\b", re.IGNORECASE)


def detect_status(text: str) -> TaskStatus:
    """Infer a status from completion or progress markers anywhere in *text*."""
    if _COMPLETED_MARKERS.search(text):
        return TaskStatus.COMPLETED
    if _IN_PROGRESS_MARKERS.search(text):
        return TaskStatus.IN_PROGRESS
    return TaskStatus.NEW


def mask_code_fences(text: str) -> str:
    """Blank out fenced code blocks, keeping every offset and newline intact."""
    return _FENCE_RE.sub(lambda match: _NON_NEWLINE_RE.sub(" ", match.group(0)), text)


def extract_bullets(text: str) -> list[str]:
    bullets: list[str] = []
    for line in text.splitlines():
        match = _BULLET_RE.match(line)
        if not match:
            continue
        content = match.group(1).strip()
        if content.startswith("[") or len(content) <= 5:
            continue
        content = re.sub(r"\*\*(.+?)\*\*", r"\1", content)
        content = re.sub(r"\*(.+?)\*", r"\1", content)
        content = re.sub(r"`(.+?)`", r"\1", content)
        bullets.append(content)
    return bullets


def extract_code_blocks(text: str) -> list[str]:
    return [match.group(1).strip() for match in _CODE_BLOCK_RE.finditer(text)]


def _bullet_list(bullets: list[str]) -> str:
    return "\n".join(f"- {bullet}" for bullet in bullets)


class RoadmapGenerator(TaskGenerator):
    """Generate a bundle from a roadmap, TODO or features document."""

    name = "roadmap"

    def __init__(
        self,
        roadmap_path: Path,
        profile: ProjectProfile | None = None,
        *,
        text: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(profile, **kwargs)
        self.roadmap_path = Path(roadmap_path)
        self._text = text

    @classmethod
    def from_text(cls, text: str, profile: ProjectProfile | None = None, **kwargs: Any) -> RoadmapGenerator:
        """Build a generator over in-memory markdown (nothing is read from disk)."""
        return cls(Path("ROADMAP.md"), profile, text=text, **kwargs)

    def read(self) -> str:
        if self._text is None:
            try:
                self._text = self.roadmap_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise SourceReadError(f"cannot read roadmap {self.roadmap_path}: {exc}") from exc
        return self._text

    def generate_tasks(self) -> TaskBundle:
        text = self.read()
        masked = mask_code_fences(text)
        bundle = TaskBundle(
            epics=self.extract_phases(text, masked),
            user_stories=self.extract_features(text, masked),
            tasks=self.extract_action_items(masked),
        )
        logger.debug(
            "Roadmap %s: %d epics, %d stories, %d tasks",
            self.roadmap_path,
            len(bundle.epics),
            len(bundle.user_stories),
            len(bundle.tasks),
        )
        return bundle

    def extract_phases(self, text: str, masked: str) -> list[TaskItem]:
        matches = list(_PHASE_RE.finditer(masked))
        epics: list[TaskItem] = []
        for index, match in enumerate(matches):
            end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
            heading = match.group(0)
            title = match.group("title").strip()
            subtitle = match.group("subtitle").strip()

            status = TaskStatus.NEW
            if DONE_GLYPH in heading:
                status = TaskStatus.COMPLETED
            elif IN_PROGRESS_GLYPH in heading:
                status = TaskStatus.IN_PROGRESS

            masked_body = masked[match.end() : end]
            goal = _GOAL_RE.search(masked_body)
            timeline = _TIMELINE_RE.search(masked_body)
            bullets = extract_bullets(text[match.end() : end])

            parts = [subtitle]
            if goal:
                parts.append(f"**Goal:** {goal.group(1).strip()}")
            if timeline:
                parts.append(f"**Timeline:** {timeline.group(1).strip()}")
            parts.append(f"**Key Features:**\n{_bullet_list(bullets[:MAX_PHASE_BULLETS])}")
            description = self.format_description(
                "\n\n".join(part for part in parts if part),
                source="Roadmap Analysis",
                files=[self.roadmap_path],
            )

            clean_title = sanitize_title(f"{title}: {subtitle}" if subtitle else title)
            if clean_title is None:
                logger.debug("Discarding phase heading %r", heading)
                continue
            epics.append(
                TaskItem(
                    kind=TaskKind.EPIC,
                    title=clean_title,
                    description=description,
                    status=status,
                    tags=self.generate_tags(f"{title} {subtitle}", f"phase-{match.group('number')}"),
                )
            )
        return epics

    def extract_features(self, text: str, masked: str) -> list[TaskItem]:
        features: list[TaskItem] = []
        for match in _FEATURE_RE.finditer(masked):
            title = match.group("title").strip()
            subtitle = match.group("subtitle").strip()
            if not self._looks_like_work(title, subtitle):
                continue

            following = _FEATURE_END_RE.search(masked, match.end())
            end = following.start() if following else min(match.end() + FEATURE_BODY_CAP, len(text))
            body = text[match.end() : end]
            bullets = extract_bullets(body)
            code_blocks = extract_code_blocks(body)

            parts = [subtitle, f"**Implementation:**\n{_bullet_list(bullets[:MAX_FEATURE_BULLETS])}"]
            if code_blocks:
                parts.append(f"**Technical Details:**\n```\n{code_blocks[0][:CODE_SNIPPET_LENGTH]}\n```")
            description = self.format_description(
                "\n\n".join(part for part in parts if part),
                source="Roadmap Feature Definition",
                files=[self.roadmap_path],
            )

            clean_title = sanitize_title(f"{title}: {subtitle}" if subtitle else title)
            if clean_title is None:
                continue
            features.append(
                TaskItem(
                    kind=TaskKind.STORY,
                    title=clean_title,
                    description=description,
                    status=detect_status(match.group(0)),
                    tags=self.generate_tags(title, "feature"),
                )
            )
        return features[:MAX_FEATURES]

    @staticmethod
    def _looks_like_work(title: str, subtitle: str) -> bool:
        title_lower = title.lower()
        if any(word in title_lower for word in FEATURE_SKIP_WORDS):
            return False
        if len(title) < MIN_CANDIDATE_LENGTH:
            return False
        subtitle_lower = subtitle.lower()
        return any(word in title_lower or word in subtitle_lower for word in WORK_INDICATORS)

    def extract_action_items(self, masked: str) -> list[TaskItem]:
        tasks: list[TaskItem] = []
        for pattern in _ACTION_PATTERNS:
            for match in pattern.finditer(masked):
                title = match.group("title").strip()
                detail = (match.groupdict().get("detail") or "").strip()
                if len(title) < MIN_CANDIDATE_LENGTH or "##" in title:
                    continue
                if self._is_status_description(title):
                    continue

                clean_title = sanitize_title(title)
                if clean_title is None:
                    continue
                status = TaskStatus.COMPLETED if _CHECKED_RE.search(match.group(0)) else TaskStatus.NEW
                tasks.append(
                    TaskItem(
                        kind=TaskKind.TASK,
                        title=clean_title,
                        description=self.format_description(detail or title, source="Roadmap Action Items"),
                        status=status,
                        tags=self.generate_tags(title, "action-item"),
                    )
                )
        return tasks[:MAX_TASKS]

    @staticmethod
    def _is_status_description(title: str) -> bool:
        """Vague status phrases ("Rock-solid foundation") unless they name an action."""
        title_lower = title.lower()
        if not any(word in title_lower for word in STATUS_DESCRIPTION_WORDS):
            return False
        return _ACTION_VERB_RE.search(title) is None
