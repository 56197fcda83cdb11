"""``taigapilot``: interactive wizard entry point."""

from __future__ import annotations

import argparse
import asyncio
from contextlib import nullcontext

from rich.console import Console
from rich.markup import escape

from taigapilot.analyzers.discovery import ProjectDiscovery
from taigapilot.cli import wizard
from taigapilot.cli.common import (
    add_common_arguments,
    configure_logging,
    format_bundle,
    format_execution_summary,
    format_profile,
    open_tracker,
    run_command,
)
from taigapilot.cli.progress import RichSubmitProgress
from taigapilot.config import TrackerSettings
from taigapilot.generators.base import Sleep
from taigapilot.models.project import ProjectProfile
from taigapilot.pipeline import build_generators, plan_sources, resolve_project, run_pipeline
from taigapilot.tracker.base import Tracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taigapilot",
        description="Populate a Taiga project from git history, roadmaps and code review",
    )
    parser.add_argument("--titles", type=int, default=3, help="Titles shown per kind in the preview (default: 3)")
    add_common_arguments(parser)
    return parser


async def run_wizard(
    args: argparse.Namespace,
    *,
    console: Console | None = None,
    tracker: Tracker | None = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    console = console or Console()

    console.print("[bold]taigapilot[/] - Taiga task generation")
    project_path = await wizard.ask_project_path()
    profile = ProjectProfile()
    if project_path is not None:
        discovery = ProjectDiscovery(project_path)
        profile = discovery.analyze()
        console.print(f"\n[bold]Project analysis[/] ({escape(str(project_path))})")
        print(format_profile(profile, discovery.suggested_tasks()))
    else:
        console.print("[yellow]No project directory; only a custom roadmap can be used.[/]")

    settings = await wizard.ask_credentials(TrackerSettings.from_env())
    sources = await wizard.ask_sources(profile, has_project=project_path is not None)

    async with open_tracker(settings, tracker) as client:
        user = await client.get_current_user()
        console.print(f"[green]Connected[/] as {user.full_name or user.username}")

        target = await wizard.ask_target(await client.list_projects())
        config = wizard.build_run_config(
            project_path=project_path, settings=settings, sources=sources, target=target
        )

        planned = plan_sources(build_generators(config, profile, sleep=sleep))
        total = sum(source.bundle.total for source in planned)
        if total == 0:
            console.print("[yellow]Nothing to generate.[/]")
            return 0

        console.print("\n[bold]Preview[/]")
        for source in planned:
            print(format_bundle(source.generator.name, source.bundle, show_titles=args.titles))

        if not await wizard.confirm(f"Create {total} items in Taiga?", default=True):
            console.print("Cancelled.")
            return 0

        project = await resolve_project(client, config)
        progress_cm = nullcontext(None) if args.verbose else RichSubmitProgress()
        with progress_cm as progress:
            results = await run_pipeline(client, project, planned, progress=progress, sleep=sleep)

    print(
        format_execution_summary(
            results, project_name=project.name, project_url=settings.project_url(project.slug)
        )
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return run_command(lambda: run_wizard(args))


__all__ = ["build_parser", "main", "run_wizard"]
