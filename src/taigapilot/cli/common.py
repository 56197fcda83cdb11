"""Shared CLI helpers: argument wiring, logging setup, error mapping and formatting."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Callable, Coroutine
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from taigapilot.config import TrackerSettings
from taigapilot.exceptions import TaigaPilotError
from taigapilot.models.enums import TaskKind
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import ExecutionResult, TaskBundle
from taigapilot.tracker.base import Tracker
from taigapilot.tracker.client import TaigaClient


def _package_version() -> str:
    try:
        return version("taigapilot")
    except PackageNotFoundError:
        return "0.0.0"


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s %(message)s", stream=sys.stderr)


def run_command(command: Callable[[], Coroutine[Any, Any, int]]) -> int:
    """Run an async command and map failures onto exit code 1."""
    try:
        return asyncio.run(command())
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 1
    except TaigaPilotError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1


@asynccontextmanager
async def open_tracker(settings: TrackerSettings, tracker: Tracker | None = None) -> AsyncIterator[Tracker]:
    """Yield *tracker* as is, or a live :class:`TaigaClient` for *settings*."""
    if tracker is not None:
        yield tracker
        return
    async with TaigaClient(settings) as client:
        yield client


def format_type_breakdown(*, epics: int, stories: int, tasks: int) -> str:
    parts: list[str] = []
    if epics:
        parts.append(f"{epics} epic{'s' if epics != 1 else ''}")
    if stories:
        parts.append(f"{stories} stor{'ies' if stories != 1 else 'y'}")
    if tasks:
        parts.append(f"{tasks} task{'s' if tasks != 1 else ''}")
    return ", ".join(parts) if parts else "none"


def format_profile(profile: ProjectProfile, suggested: list[str] | None = None) -> str:
    lines = [
        f"  Type:        {profile.type}",
        f"  Framework:   {profile.framework or 'not detected'}",
        f"  Git:         {'yes' if profile.has_version_control else 'no'}",
        f"  Roadmaps:    {', '.join(p.name for p in profile.roadmap_files) or 'none'}",
    ]
    if profile.documentation_files:
        lines.append(f"  Docs:        {', '.join(profile.documentation_files)}")
    if suggested:
        lines.append("  Suggested focus areas:")
        lines.extend(f"    - {task}" for task in suggested)
    return "\n".join(lines)


def format_bundle(name: str, bundle: TaskBundle, *, show_titles: int = 0) -> str:
    """One block per generator: counts, then up to *show_titles* titles per kind."""
    breakdown = format_type_breakdown(
        epics=len(bundle.epics), stories=len(bundle.user_stories), tasks=len(bundle.tasks)
    )
    lines = [f"  {name}: {bundle.total} items ({breakdown})"]
    if show_titles:
        for label, items in (("epic", bundle.epics), ("story", bundle.user_stories), ("task", bundle.tasks)):
            for item in items[:show_titles]:
                lines.append(f"    [{label}] {item.title} ({item.status})")
            if len(items) > show_titles:
                lines.append(f"    ... {len(items) - show_titles} more {label} item(s)")
    return "\n".join(lines)


def format_execution_summary(results: dict[str, ExecutionResult], *, project_name: str, project_url: str) -> str:
    created = {kind: sum(r.created[kind] for r in results.values()) for kind in TaskKind}
    failed = [title for r in results.values() for title in r.failed]
    skipped = [title for r in results.values() for title in r.skipped]
    total = sum(created.values())

    lines = [
        "",
        "taigapilot - population complete",
        "",
        f"  Project:   {project_name}",
        f"  URL:       {project_url}",
        "",
        "  Created:   {} ({})".format(
            total,
            format_type_breakdown(
                epics=created[TaskKind.EPIC], stories=created[TaskKind.STORY], tasks=created[TaskKind.TASK]
            ),
        ),
    ]
    if failed:
        lines.append(f"  Failed:    {len(failed)}")
        lines.extend(f"    - {title}" for title in failed)
    if skipped:
        lines.append(f"  Skipped:   {len(skipped)} (no usable title)")
    lines.append("")
    return "\n".join(lines)
