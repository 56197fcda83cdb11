"""``taigapilot-roadmap``: populate one project from a roadmap file, non-interactively."""

from __future__ import annotations

import argparse
import asyncio
from contextlib import nullcontext
from pathlib import Path

from taigapilot.cli.common import (
    add_common_arguments,
    configure_logging,
    format_bundle,
    format_execution_summary,
    open_tracker,
    run_command,
)
from taigapilot.cli.progress import RichSubmitProgress
from taigapilot.config import TrackerSettings
from taigapilot.generators.base import Sleep
from taigapilot.generators.roadmap import RoadmapGenerator
from taigapilot.tracker.base import Tracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taigapilot-roadmap", description="Create Taiga items from a roadmap file")
    parser.add_argument("--roadmap", required=True, help="Path to the roadmap markdown file")
    parser.add_argument("--project", required=True, help="Slug of the target Taiga project")
    parser.add_argument("--wait", type=int, default=5, help="Seconds to wait before submitting (default: 5)")
    add_common_arguments(parser)
    return parser


async def run_roadmap(
    args: argparse.Namespace,
    *,
    tracker: Tracker | None = None,
    settings: TrackerSettings | None = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    settings = settings or TrackerSettings.from_env()
    generator = RoadmapGenerator(Path(args.roadmap), sleep=sleep)
    bundle = generator.generate_tasks()
    if bundle.total == 0:
        print(f"No epics, stories or tasks found in {args.roadmap}")
        return 0

    async with open_tracker(settings, tracker) as client:
        project = await client.get_project_by_slug(args.project)
        before = len(await client.list_user_stories(project.id))
        print(f"Project: {project.name} ({before} user stories)")
        print(format_bundle(generator.name, bundle, show_titles=bundle.total))

        for remaining in range(args.wait, 0, -1):
            print(f"Starting in {remaining}s...")
            await sleep(1)

        progress_cm = nullcontext(None) if args.verbose else RichSubmitProgress()
        with progress_cm as progress:
            result = await generator.execute(client, project, bundle=bundle, progress=progress)
        after = len(await client.list_user_stories(project.id))

    print(
        format_execution_summary(
            {generator.name: result}, project_name=project.name, project_url=settings.project_url(project.slug)
        )
    )
    print(f"User stories: {before} -> {after}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return run_command(lambda: run_roadmap(args))


__all__ = ["build_parser", "main", "run_roadmap"]
